import re

from prompt_toolkit import PromptSession
from prompt_toolkit.lexers import PygmentsLexer
from prompt_toolkit.shortcuts import clear

from ufel.box import disp
from ufel.cmpx import cmpx
from ufel.compiler import Compiler
from ufel.errors import UfelError
from ufel.highlight import UfelLexer
from ufel.node import sig
from ufel.runtime import Ufel

def main() -> None:
    session: PromptSession = PromptSession()
    rt = Ufel()

    print('Welcome to Ufel. C-d to quit')
    while True:
        try:
            src = session.prompt('ufel> ', lexer=PygmentsLexer(UfelLexer))
        except KeyboardInterrupt:
            continue
        except EOFError:
            break

        if len(src.strip()) == 0:  # User hit return only
            continue

        if src.strip() == ')clear':
            rt = Ufel()
            clear()
            print('Runtime reset')
            continue

        if m := re.match(r'^\s*\]compile\s+(.*)$', src):
            try:
                asm = Compiler().load_str(m.group(1))
            except UfelError as err:
                report(err)
                continue
            print(f'{asm.root}  {sig(asm.root)!r}')
            continue

        if re.match(r'^\s*\]cmpx', src):
            candidates = [e for (i, e) in enumerate(src.split('"')) if i%2]
            try:
                print(cmpx(candidates))
            except UfelError as err:
                report(err)
            continue

        try:
            rt.run_str(src)
        except UfelError as err:
            report(err)  # The stack keeps whatever was there when it failed
            continue

        # Show and clear whatever the line left behind
        for val in rt.take_stack():
            disp(val)

def report(err: UfelError) -> None:
    for e in err:
        print(e)
        if e.line:
            print(f'  {e.line}')

if __name__=="__main__":
    main()
