# localca/utils/formatting.py

from __future__ import annotations

from localca.constants import COLOUR, COLOUR_BRIGHT, COLOUR_RESET
from localca.constants import COLOUR_ERROR, COLOUR_OK, COLOUR_WARNING
from localca.constants import STATUS_COLUMN

def title(text: str, level: int=1, extra=None) -> None:
    """
    Prints a title in a consistant format

    Args:
        text (str): The text to be displayed
        level (int): The level of heading (optional)
        extra (str): Decoration or highlighted suffix, depending on level
    """

    title_colour = COLOUR['cyan']
    reset = COLOUR_RESET

    if level == 1:
        title_colour = COLOUR['bold_yellow']

        if extra is None:
            extra = '---===oooO'

        print(f'{extra} {title_colour}{text}{reset} {extra[::-1]}\n')

    elif level == 2:
        title_colour = COLOUR['bold_yellow']

        if extra is not None:
            print(f'{title_colour}{text}{reset} [ {COLOUR_BRIGHT}{extra}{reset} ]\n')
        else:
            print(f'{title_colour}{text}{reset}\n')

    elif level == 3:
        print(f"{COLOUR['bold_white']}{text}{reset}\n")

    elif level == 7:
        print(f'{text}')

    elif level == 8:
        print(f'{text}...')

    elif level == 9:
        # Stage line, completed by print_result()
        print(f'{text}...', end='')

    else:
        print(f'{title_colour}{text}{reset}\n')

def print_result(success, *, ok_msg='  OK  ', failed_msg='FAILED') -> bool:
    """
    Prints a ANSI success or failure marker at the status column

    Args:
        success (bool): Success test condition
        ok_msg (str): OK message text
        failed_msg (str): Failed message text
    """

    column = f'\033[{STATUS_COLUMN}G'

    if success:
        msg = ok_msg
        msg_colour = COLOUR_OK
    else:
        msg = failed_msg
        msg_colour = COLOUR_ERROR

    print(f'{column}[ {msg_colour}{msg}{COLOUR_RESET} ]')

    return bool(success)

def highlight(text) -> str:
    """ Wrap a value in the bright colour used for paths and names """
    return f'{COLOUR_BRIGHT}{text}{COLOUR_RESET}'

def error(text: str) -> None:
    """
    Prints an error message with custom formatting.

    Args:
        text (str): The error message to be displayed.
    """

    print(f'{COLOUR_ERROR}Error:{COLOUR_RESET} {text}')

def warning(text: str) -> None:
    """
    Prints a warning message with custom formatting.

    Args:
        text (str): The warning message to be displayed.
    """

    print(f'⚠️ {COLOUR_WARNING}Warning:{COLOUR_RESET} {text}')
