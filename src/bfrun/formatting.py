## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def offset_to_line_column(source: str, offset: int) -> tuple[int, int]:
    """1-based line and column of a character offset."""
    before = source[:offset]
    line = before.count('\n') + 1
    return line, offset - (before.rfind('\n') + 1) + 1


def format_position_context(filename: str, source: str, offset: int) -> str:
    line, column = offset_to_line_column(source, offset)
    lines = source.splitlines()
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}, column {column}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i]
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if 0 < column <= len(line_content):
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1]}\033[0m" +
                    line_content[column:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'
