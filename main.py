import sys

from rich.pretty import pprint

from argtree import *

__prog__ = "demo"
__version__ = "0.0.0"


class Copy(Feature):
    requires_inputs = True

    def __init__(self):
        super().__init__(
            "copy",
            ("cp", "copy"),
            "Copy files to a target directory",
            "Copies every given file into the target directory.\n"
            "Files that already exist are skipped unless --force is given."
        )
        self.add(FlagInput("force", ("-f", "--force"), "Overwrite existing files"))
        self.add(StringInput("target", ("-t", "--target"), "Target directory"))
        self.add(UInt8Input("retries", ("-r", "--retries"), "Attempts per file"))
        self.add(StringListInput("exclude", ("-x", "--exclude"), "Skip files matching a pattern"))

    def verify_inputs(self):
        return bool(self.inputs) and self.get_string("target") is not None

    def execute(self):
        pprint(self)
        pprint({
            "force": self.get_boolean("force"),
            "target": self.get_string("target"),
            "retries": self.get_uint8("retries", 3),
            "exclude": self.get_string_list("exclude"),
            "files": self.inputs,
        })
        return True


commands = CommandSet("demo - argtree example", name=__prog__)
commands.add(Help(("-?", "-h", "--help")))
commands.add(HelpExtended(("-??", "-hd", "--help-detailed")))
commands.add(Version(("-v", "--version")))
commands.add(Copy())


if __name__ == '__main__':
    sys.exit(0 if commands.process_args(sys.argv[1:]) else 1)
