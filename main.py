from rich.pretty import pprint

from argtally import *

parser = ArgumentParser("Demonstrates every kind of argument argtally understands.", shell=True)

parser.add("a", "Positional argument 1.", 1)
parser.add("b", "Positional argument 2 with choices from 100, 200, 300.", 1, True, 100, (100, 200, 300))
parser.add("c", "Positional argument 3, optional, and with default.", 1, False, 10)
parser.add("-h", "Print help message.", 0, False, aliases=("-help", "--help"))
parser.add(
    "-f",
    "Simple flag with a very long help description that will be wrapped "
    "automatically into a two column format when help is printed for "
    "this program. Newlines are kept as well.\nFor example:\n"
    "0 - an item\n1 - another item\n2 - and another item.",
    0,
    False,
    aliases=("-flag", "--flag"),
)
parser.add("-l", "A list of arbitrary length.", ..., False, aliases=("-list", "--list"))
parser.add("-s", "Single string which is required.", 1, True, aliases=("-str", "--str", "-string", "--string"))
parser.add("-i", "Integer from 1, 2, 3, 4.", 2, False, 1, (1, 2, 3, 4))
parser.add("-u", "Unsigned integer from 10, 20, 30, 40.", 1, False, 10, (10, 20, 30, 40))
parser.add("-float", "Float number.", 1, False, 0)
parser.add("-double", "Double number.", 1, False, 0)


if __name__ == '__main__':
    import sys

    if {"-h", "-help", "--help"} & set(sys.argv[1:]):
        parser.print_help()
        sys.exit(0)

    parser.parse()
    pprint({
        "a": parser.value(0),
        "b": parser.value(1, 0, Scalar.INT32),
        "c": parser.value(2, 0, Scalar.INT32),
        "flag": parser.given("-f"),
        "list": parser.values("-l"),
        "string": parser.value("-s"),
        "integers": parser.values("-i", Scalar.INT32),
        "unsigned": parser.value("-u", 0, Scalar.UINT32),
        "float": parser.value("-float", 0, Scalar.FLOAT),
        "double": parser.value("-double", 0, Scalar.DOUBLE),
    })
