## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# tinyforth — A minimal Forth-like stack language with runtime-defined words.
#

import sys
import time
import traceback
from pathlib import Path
from dataclasses import dataclass

import click

from .errors import ForthError, ForthParseError, UnknownWord, StackUnderflow, TypeMismatch, ExtensionError
from .parser import parse, format_source_context
from .linker import is_incomplete
from .formatting import write_without_ansi, format_item, show_stack
from .runtime import Runtime, SAMPLE_PROGRAM


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    ignore: bool
    stats: bool
    plain: bool


@dataclass
class ExecutionItem:
    source: str
    filename: str


class ForthRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.ignore = config.ignore
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = Runtime(extensions=True)
        self.total_stats = {'steps': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False
        self.executed_items = 0

    def _maybe_fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '', is_repl: bool = False) -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True
        if not is_repl and not self.ignore: sys.exit(1)

    def _handle_exception(self, exc, filename: str, source: str, is_repl: bool = False) -> None:
        context = format_source_context(source, exc.forth_meta, exc.forth_token) if isinstance(exc, ForthError) else ''
        if isinstance(exc, ForthParseError):
            self._maybe_fatal_error("SYNTAX ERROR.", f"Parsing `\033[97m{filename}\033[0m` caused a problem! {exc}", type(exc).__name__, context, is_repl)
        elif isinstance(exc, UnknownWord):
            detail = f"Word `\033[1;97m{exc.forth_token}\033[0m` from `\033[97m{filename}\033[0m` was not found in dictionary!"
            self._maybe_fatal_error("NAME ERROR.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, (StackUnderflow, TypeMismatch)):
            detail = f"Word \033[1;97m`{exc.forth_token}`\033[0m failed: {exc}"
            stack = self.runtime.stack
            print(f'\033[30;43m STACK ERROR. \033[0m {detail} (Exception: \033[33m{type(exc).__name__}\033[0m)\n{context}', file=sys.stderr)
            print(f'\033[1;33m  Stack content is\033[0;33m\n    ', end='', file=sys.stderr)
            show_stack(stack, width=None, file=sys.stderr)
            print('\033[0m', file=sys.stderr)
            self.failure = True
            if not is_repl and not self.ignore: sys.exit(1)
        elif isinstance(exc, ExtensionError):
            detail = f"Importing extension module failed while resolving `{exc.forth_token}`: \033[97m{exc.filename}\033[0m"
            tb_lines = traceback.format_exception(exc.__cause__ if exc.__cause__ else exc, chain=False)
            traceback_text = ''.join([line for line in tb_lines if "src/tinyforth/" not in line and "<frozen" not in line]).rstrip() + '\n'
            self._maybe_fatal_error("IMPORT ERROR.", detail, type(exc).__name__, '\n' + traceback_text + context, is_repl)
        else:
            token = getattr(exc, 'forth_token', None)
            self._maybe_fatal_error("RUNTIME ERROR.", f"Word \033[1;97m`{token}`\033[0m caused an error in evaluation! {exc}",
                                    type(exc).__name__, context + traceback.format_exc(), is_repl)

    def execute_items(self, items: list[ExecutionItem]) -> None:
        for item in items:
            self._execute_script(item.source, item.filename)

    def _execute_script(self, source: str, filename: str, is_repl: bool = False) -> None:
        try:
            self.runtime.run(source, filename=filename, verbosity=self.verbose, stats=self.total_stats)
        except (ForthError, Exception) as exc:
            self._handle_exception(exc, filename, source, is_repl=is_repl)
        else:
            self.executed_items += 1

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('tinyforth - Stack language REPL; type Ctrl+C to exit.')
        source = ""

        while True:
            try:
                prompt = "\033[36m<<< \033[0m" if not source.strip() else "\033[36m... \033[0m"
                line = input(prompt)
                if len(line.strip()) == 0: continue
                if line.strip() in ('quit', 'exit'): break
                source += line + "\n"

                # Keep reading lines while a definition is still open.
                try:
                    if is_incomplete(parse(source)): continue
                except ForthParseError:
                    pass  # Reported when executed below.

                self._execute_script(source, '<REPL>', is_repl=True)
                if len(self.runtime.stack): print("\033[90m>>>\033[0m", format_item(self.runtime.stack[-1]))
                source = ""

            except (KeyboardInterrupt, EOFError):
                print(""); break

    def finalize(self) -> int:
        if self.total_stats and self.executed_items > 0:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


def _inline_command_source(index: int, command: str) -> ExecutionItem:
    return ExecutionItem(command.rstrip() + '\n', f'<INPUT_{index}>')


def _parse_dev_tokens(tokens: list[str]) -> list[tuple[str, Path | str | None]]:
    actions: list[tuple[str, Path | str | None]] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token == '--':
            index += 1
            continue
        if token in ('-c', '--command'):
            index += 1
            if index >= len(tokens):
                raise click.BadParameter("Missing inline code after -c/--command option.")
            actions.append(('command', tokens[index]))
            index += 1
            continue
        if token.startswith('-c=') or token.startswith('--command='):
            _, value = token.split('=', 1)
            if value == '':
                raise click.BadParameter("Empty code supplied to command option.")
            actions.append(('command', value))
            index += 1
            continue
        if token in ('-r', '--repl'):
            actions.append(('repl', None))
            index += 1
            continue
        if token.startswith('-'):
            raise click.BadParameter(f"Unknown option `{token}`.")
        path = Path(token)
        if not path.exists():
            raise click.BadParameter(f"File `{token}` not found.")
        actions.append(('file', path))
        index += 1
    return actions


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', default=0, count=True, help='Trace procedure calls (-v) or every step (-vv).')
@click.option('--ignore', '-i', is_flag=True, help='Ignore errors and continue executing.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, ignore: bool, stats: bool, plain: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, ignore=ignore, stats=stats, plain=plain)


@cli.command('run-file')
@click.argument('script', type=click.File('r', encoding='utf-8'))
@click.pass_context
def run_file(ctx: click.Context, script) -> None:
    runner = ForthRunner(ctx.obj['config'])
    runner.execute_items((ExecutionItem(script.read(), script.name or '<STDIN>'),))
    ctx.exit(runner.finalize())


@cli.command('run-dev', context_settings={'ignore_unknown_options': True, 'allow_extra_args': True})
@click.argument('tokens', nargs=-1)
@click.pass_context
def run_dev(ctx: click.Context, tokens: tuple[str, ...]) -> None:
    runner = ForthRunner(ctx.obj['config'])
    actions = _parse_dev_tokens(list(tokens))

    command_index = 1
    for action, payload in actions:
        if action == 'file':
            runner.execute_items((ExecutionItem(payload.read_text(encoding='utf-8'), str(payload)),))
        elif action == 'command':
            runner.execute_items((_inline_command_source(command_index, payload),))
            command_index += 1
        elif action == 'repl':
            runner.repl()
        else:
            raise NotImplementedError

    if not actions:
        runner.repl()
    ctx.exit(runner.finalize())


@cli.command('run-repl')
@click.pass_context
def run_repl(ctx: click.Context) -> None:
    runner = ForthRunner(ctx.obj['config'])
    runner.repl()
    ctx.exit(runner.finalize())


@cli.command('run-sample')
@click.pass_context
def run_sample(ctx: click.Context) -> None:
    runner = ForthRunner(ctx.obj['config'])
    print(f"running: {SAMPLE_PROGRAM}")
    runner.execute_items((ExecutionItem(SAMPLE_PROGRAM, '<SAMPLE>'),))
    ctx.exit(runner.finalize())


def main(argv: list[str] | None = None) -> None:
    a = list(sys.argv[1:] if argv is None else argv)
    g = [t for t in a if t in ('--ignore', '--stats', '--plain', '-i', '-p') or (t.startswith('-v') and set(t[1:]) == {'v'}) or t == '--verbose']
    r = [t for t in a if t not in g]

    if len(r) == 0:
        # No args: if stdin has data, treat as file '-', else REPL.
        cmd, tail = ('run-file', ['-']) if not sys.stdin.isatty() else ('run-repl', [])
    elif r[0] in ('run-file', 'run-dev', 'run-repl', 'run-sample'):
        cmd, tail = r[0], r[1:]
    elif r == ['-']:
        cmd, tail = 'run-file', ['-']
    elif '--repl' in r:
        cmd, tail = 'run-repl', []
    elif '--sample' in r:
        cmd, tail = 'run-sample', []
    elif len(r) == 1 and Path(r[0]).is_file():
        cmd, tail = 'run-file', r
    else:
        cmd, tail = 'run-dev', r

    cli.main(args=[*g, cmd, *tail], prog_name='tinyforth')


if __name__ == "__main__":
    main()
