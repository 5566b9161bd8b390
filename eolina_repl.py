import argparse
import logging
import sys
from collections import deque
from pathlib import Path
from typing import List, Optional

from colorama import Fore, Style

from eolina.eolina_config import ConfigError, IoConfig, LOG_LEVELS, Mode, load_config
from eolina.eolina_context import ExecutionContext
from eolina.eolina_errors import ParseError
from eolina.eolina_generator import Completed
from eolina.eolina_io import Io
from eolina.eolina_printer import Printer
from eolina.eolina_runtime import ProgramRunner, format_error, parse_error_span

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

COMMANDS = [
    "  h |  help    print all commands",
    "  q | queue    display the current queue",
    "  c | clear    clear the current queue",
    "v | v+ | v-    view/increase/decrease logging verbosity",
    "     tokens    display all token descriptions",
    " eg | example  display examples",
    "       exit    exit the program",
]

TOKENS = [
    "Token    take:push description",
    "Basic Tokens:",
    "    <    0:1       input",
    "    >    1:0       output",
    "    ~    2:1       concat",
    "    *    1:2       duplicate",
    "   @x    0:0       rotate queue x times",
    "Checks:",
    "    v    1:1       check all ascii vowel",
    "    c    1:1       check all ascii consonant",
    "    _    1:1       check all ascii lower",
    "    ^    1:1       check all ascii upper",
    "Transforms:",
    "    .    1:1       join array elements to string",
    "  /x/    1:1       splits string by literal or into chars if x not given",
    "|x.y|    1:1       slices by abs or rel indices",
    "  |x|    1:1       indexes by abs or rel index",
    "  [x]    1:1       filter all by x: Checks",
    "  {x}    1:1       map all by x: Maps",
    "Maps:",
    "    _    ---       to ascii lower case",
    "    ^    ---       to ascii upper case",
    "    %    ---       to swapped ascii case",
]

EXAMPLES = [
    "        <>    echo program",
    "      <*>>    duplicate echo",
    "<*[^][_]~>    orders by case, upper first",
    "   <|.-3|>    relative slicing like [..len - 3]",
]

_LEVEL_TAGS = {
    logging.DEBUG: ("dbg", Fore.CYAN),
    logging.INFO: ("inf", Fore.GREEN),
    logging.WARNING: ("wrn", Fore.YELLOW),
    logging.ERROR: ("err", Fore.RED),
    logging.CRITICAL: ("err", Fore.RED),
}


class ReplError(Exception):
    pass


class TagFormatter(logging.Formatter):
    """Prefixes every record with a short level tag, colored if requested."""

    def __init__(self, color: bool = False):
        super().__init__("%(message)s")
        self.color = color

    def format(self, record):
        tag, color = _LEVEL_TAGS.get(record.levelno, ("trc", Style.DIM))
        if self.color:
            tag = f"{color}{tag}{Style.RESET_ALL}"
        return f"[{tag}] {super().format(record)}"


def setup_logging(config: IoConfig) -> logging.Handler:
    """Attaches a stderr handler to the `eolina` logger, at the configured level."""
    root = logging.getLogger("eolina")
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(TagFormatter(config.color))
    root.addHandler(handler)
    root.setLevel(config.logging_level)
    return handler


def teardown_logging(handler: logging.Handler):
    logging.getLogger("eolina").removeHandler(handler)


# A basic input prompt; replaced in tests.
def read_input(prompt: str) -> str:
    sys.stdout.write(prompt)
    sys.stdout.flush()
    line = sys.stdin.readline()
    if line == "":
        raise EOFError
    return line[:-1] if line.endswith("\n") else line


# ===================================================================
# REPL
# ===================================================================

class Repl:
    """Interactively executes programs one instruction at a time against a persistent queue."""

    def __init__(self, config: IoConfig, io: Optional[Io] = None):
        self.config = config
        self.io = io or Io(config)
        self.queue = deque()
        self.printer = Printer()
        self.logger = logging.getLogger("eolina")

    def command(self, cmd: str) -> bool:
        """Executes a `!` command; returns True if the REPL should exit."""
        match cmd:
            case "help" | "h":
                print("\n".join(COMMANDS))
            case "queue" | "q":
                print(f"queue: {self.printer.pformat(self.queue)}")
            case "clear" | "c":
                self.queue.clear()
                self.io.info("queue cleared")
            case "v":
                print(self.config.log_level)
            case "v+" | "v-":
                before, after = self.config.adjust_log_level(cmd == "v+")
                self.logger.setLevel(self.config.logging_level)
                if before == after:
                    print(f"log level unchanged [{before}]")
                else:
                    print(f"changed log level from [{before}] to [{after}]")
            case "tokens":
                print("\n".join(TOKENS))
            case "example" | "eg":
                print("\n".join(EXAMPLES))
            case "exit":
                return True
            case _:
                raise ReplError(f"unknown command: '{cmd}'")
        return False

    def execute(self, program: str):
        """Tokenizes `program` up front, then steps it to completion."""
        try:
            ctx = ExecutionContext(program, self.queue, self.io, interactive=True, eager=True)
        except ParseError as e:
            # Rejected before the queue is touched.
            self.io.error(format_error(e, parse_error_span(program, e)))
            return

        while True:
            state = ctx.resume()
            if isinstance(state, Completed):
                break
            self.logger.debug("[%s]: executed %s", ctx.context_line(styled=True), state.token)

        if not state.ok:
            self.io.error(format_error(state.error, ctx.span))

    def run(self):
        print("Eolina REPL v0.1")
        print("Type '!help' for commands, '!exit' or press Ctrl+D to quit.")

        while True:
            try:
                line = read_input(">>> ")
            except EOFError:
                print("\nExiting.")
                break

            if not line:
                continue

            if line.startswith("!"):
                try:
                    if self.command(line[1:]):
                        break
                except ReplError as e:
                    self.io.warning(e)
                continue

            self.execute(line)


# ===================================================================
# CLI
# ===================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eolina",
        description="Execute and interpret Eolina programs.",
        epilog="'eolina repl' enters an interactive read-eval-print-loop.\n\n"
               "exit codes:\n  0    ok\n  1    runtime error\n  2    missing argument/subcommand",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("-c", "--color", choices=["on", "off", "auto"], default=None,
                        help="whether or not to use colored output (default: auto)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="log output verbosity [-v, -vv]")
    parser.add_argument("-q", "--quiet", action="store_true", help="hide any log messages")
    parser.add_argument("--config", metavar="FILE", help="a YAML file with io settings")
    parser.add_argument("program", nargs="?", metavar="PROGRAM|PATH",
                        help="a program or path to a file containing a program")
    parser.add_argument("inputs", nargs="*", metavar="INPUTS",
                        help="the inputs to the program, read from stdin if not given")
    return parser


def build_config(args: argparse.Namespace, repl: bool) -> IoConfig:
    """Defaults, then the config file, then command line flags."""
    if args.config:
        config = load_config(args.config)
    else:
        config = IoConfig(log_level="info" if repl else "warning")

    # Without a flag, a config file keeps its own color setting.
    if args.color == "on":
        if not sys.stderr.isatty():
            raise ConfigError("`--color=on` is not allowed if stderr is not a tty")
        config.color = True
    elif args.color == "off":
        config.color = False
    elif args.color == "auto" or not args.config:
        config.color = sys.stderr.isatty()

    if args.quiet:
        config.log_level = "off"
    elif args.verbose:
        at = LOG_LEVELS.index(config.log_level) + args.verbose
        config.log_level = LOG_LEVELS[min(at, len(LOG_LEVELS) - 1)]

    if repl:
        config.mode = Mode.PROMPTED
    return config


def run_program(program: str, inputs: List[str], config: IoConfig) -> int:
    """Evaluates a program (or the program in a file) once; errors are propagated as exit code 1."""
    # Program text can be too long or odd to be a file name at all.
    try:
        is_file = Path(program).is_file()
    except (OSError, ValueError):
        is_file = False

    handler = setup_logging(config)
    try:
        runner = ProgramRunner(Io(config))
        if is_file:
            result = runner.run_file(program, inputs)
        else:
            result = runner.run(program, inputs)
    except OSError as e:
        print(f"Error: could not read file '{program}': {e}", file=sys.stderr)
        return EXIT_FAILURE
    finally:
        teardown_logging(handler)

    if not result.ok:
        print(result.format_error(), file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


def run_repl(config: IoConfig) -> int:
    handler = setup_logging(config)
    try:
        Repl(config).run()
    finally:
        teardown_logging(handler)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.program is None:
        parser.print_help()
        return EXIT_USAGE

    repl = args.program == "repl" and not args.inputs
    try:
        config = build_config(args, repl)
    except (ConfigError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if repl:
        return run_repl(config)
    return run_program(args.program, args.inputs, config)


def cli():
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nExiting.")
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":
    cli()
