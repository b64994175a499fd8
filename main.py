from rich.pretty import pprint

from argscan import *

__prog__ = "copy"


@command(
    definitions=(
        Argument("source", Mode.REQUIRED, "File to copy"),
        Argument("targets", Mode.COMPLEX, "Destinations", default="."),
        Option("verbose", "v", descr="Report every copied file"),
        Option("exclude", "x", Mode.COMPLEX | Mode.OPTIONAL, "Patterns to skip", default="*.tmp"),
        Option("mode", "m", Mode.REQUIRED, "Permission bits"),
    ),
    shell=True,
)
def callback(concrete):
    pprint(concrete)


if __name__ == '__main__':
    pprint(callback)
    print(callback.synopsis())
    raise SystemExit(invoke(callback))
