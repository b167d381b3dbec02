import logging

from rich.logging import RichHandler
from rich.pretty import pprint

from argtree import *

logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler()])

program = Program(
    "colors",
    options=[
        option("red", alias="r", multi=True, descr="Red shades to mix in."),
        flag("green", alias="g", descr="Add green."),
        flag("blue", alias="b", descr="Add blue."),
        env("palette", "COLORS_PALETTE", default="default"),
    ],
    subcommands=[
        Command(
            "mix",
            options=[option("ratio", parse=float, default=0.5)],
            positionals=[positional("names", multi=True)],
        ),
    ],
    descr="Mix colors from the command line.",
    help=True,
    version="1.0.0",
    fancy=True,
)


if __name__ == '__main__':
    pprint(Parser(program).run())
