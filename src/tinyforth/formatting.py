## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

from .types import Stack, Procedure


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def format_item(it) -> str:
    if isinstance(it, Procedure):
        return ': ' + ' '.join([it.name, *(format_item(n) for n in it.body), ';'])
    return str(it)


def show_stack(stack: Stack, width=72, end='\n', file=None):
    stack_str = ' '.join(format_item(s) for s in stack) if len(stack) else '∅'
    if width is not None and len(stack_str) > width:
        stack_str = '… ' + stack_str[-width+2:]
    print(f"{stack_str:>{width}}" if width else stack_str, end=end, file=file)


def show_node_and_stack(node, stack: Stack, depth=0, width=72):
    node_str = ('  ' * depth) + format_item(node)
    if len(node_str) > width:
        node_str = node_str[:+width-2] + ' …'
    show_stack(stack, end='')
    print(f" \033[36m <=> \033[0m {node_str:<{width}}")
