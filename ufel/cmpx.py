"""
Compare the execution times of short expressions, in the manner of Dyalog's
`cmpx` from the `dfns` workspace.

It's available in the repl under `]cmpx`.

ufel> ]cmpx "[1 2 3 4] r+" "[1 2 3 4] r(+)" "[1 2 3 4] s+"
[1 2 3 4] r+   → 0.0001 |  0% ⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕
[1 2 3 4] r(+) → 0.0001 |  2% ⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕
[1 2 3 4] s+   → 0.0001 | 14% ⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕⎕
"""
import timeit

from ufel.runtime import Ufel

def cmpx(variants: list[str], number: int=10) -> str:
    if not variants:
        return ""
    times = [timeit.timeit(lambda: Ufel().run_str(code), number=number) / number
             for code in variants]
    base, longest = times[0], max(times)

    rows = [(code, f"{t:.4f}", str(round(100*t/base - 100) if base else 0),
             round(40*t/longest) if longest else 0)
            for code, t in zip(variants, times)]
    code_w = max(len(r[0]) for r in rows)
    time_w = max(len(r[1]) for r in rows)
    pc_w = max(len(r[2]) for r in rows)

    return "\n".join(
        f"{code:<{code_w}} → {t:>{time_w}} | {pc:>{pc_w}}% {'⎕'*bar}"
        for code, t, pc, bar in rows
    )
