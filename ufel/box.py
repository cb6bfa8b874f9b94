"""
Grid display of arrays for the REPL and the command line.

Scalars and lists print as their str(). Anything with two or more axes is
drawn as a grid, one text row per run of the last axis, with a blank line
between consecutive blocks of the second-to-last axis:

    ╭─
    ╷ 1 2 3
      4 5 6
           ╯

A form with more than one group is drawn over all of its axes in order,
which is how the data is laid out, with the form shown after the corner.
"""
from typing import Any

from ufel.arr import Array, fmt_num

def _cell(e: Any) -> str:
    return fmt_num(e) if isinstance(e, float) else str(e)

def box(a: Array) -> list[str]:
    """
    Convert an array to a list of text rows
    """
    dims = a.form.dims
    if len(dims) < 2 or a.form.elems() == 0:
        return [str(a)]

    cells = [_cell(e) for e in a.data]
    last = dims[-1]
    block = dims[-2]

    # Right-align each column to its widest cell
    widths = [max(len(cells[i]) for i in range(j, len(cells), last)) for j in range(last)]
    rows = []
    for r, start in enumerate(range(0, len(cells), last)):
        if r and r % block == 0:
            rows.append('')
        rows.append(' '.join(f"{c:>{widths[j]}}" for j, c in enumerate(cells[start:start+last])))

    width = max(map(len, rows))
    header = '╭─' if a.form.is_normal() else f"╭─ {a.form!r}"
    output = [header]
    for i, row in enumerate(rows):
        output.append(('╷ ' if i == 0 else '  ') + row if row else '')
    output.append(' '*(width+2) + '╯')
    return output

def show(a: Array) -> str:
    return '\n'.join(box(a))

def disp(a: Array) -> None:
    print(show(a))
