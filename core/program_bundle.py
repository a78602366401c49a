"""
Program bundle loading.

A robot program lives in its own folder as two text files, ``prog.txt`` (the
motion program) and ``pars.txt`` (its point/parameter set). The folder name,
uppercased, is the program name the controller stores it under.
"""

import os
import re
from dataclasses import dataclass

from core.exceptions import ProgramFileError
from core.logger import get_logger

PROGRAM_FILE = "prog.txt"
PARAMETERS_FILE = "pars.txt"
DEFAULT_PROGRAM_NAME = "DATA"
LINE_END = "\r\n"

# Only CR, LF and CRLF end a line; other control characters are line content
LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass
class ProgramBundle:
    """Program and parameter texts ready for upload"""
    name: str
    program: str
    parameters: str

    @property
    def program_payload(self) -> str:
        """Program text with the NAME= header line the controller expects"""
        return f"NAME={self.name}{LINE_END}{self.program}"


def split_program_path(path: str):
    """
    Return (directory, program name) for a program folder path.

    >>> split_program_path("/a/b/MyProg")
    ('/a/b/MyProg', 'MYPROG')
    >>> split_program_path("")
    ('', 'DATA')
    """
    if not path:
        return "", DEFAULT_PROGRAM_NAME

    trimmed = path.rstrip("/\\") or path
    cut = max(trimmed.rfind("/"), trimmed.rfind("\\"))
    name = trimmed[cut + 1:].upper()
    return trimmed, name or DEFAULT_PROGRAM_NAME


def read_crlf_text(file_path: str) -> str:
    """Read a text file and re-join its lines with CRLF, whatever they used"""
    try:
        with open(file_path, 'r', encoding='ascii', newline='') as f:
            content = f.read()
    except OSError as e:
        raise ProgramFileError(f"Failed to open {file_path}: {e}", module="program")
    except UnicodeDecodeError as e:
        raise ProgramFileError(f"{file_path} is not plain ASCII: {e}", module="program")

    lines = LINE_BREAK.split(content)
    if lines[-1] == "":
        lines.pop()
    return "".join(line + LINE_END for line in lines)


def load_program_bundle(path: str) -> ProgramBundle:
    """
    Load prog.txt and pars.txt from the folder named by ``path``.

    An empty path reads both files from the working directory and names the
    program DATA.

    Raises:
        ProgramFileError: if either file cannot be opened
    """
    logger = get_logger()
    directory, name = split_program_path(path)

    prog_path = os.path.join(directory, PROGRAM_FILE)
    pars_path = os.path.join(directory, PARAMETERS_FILE)
    logger.debug(f"Reading program {name} from {prog_path} and {pars_path}", category="program")

    program = read_crlf_text(prog_path)
    parameters = read_crlf_text(pars_path)

    logger.info(
        f"Loaded program {name}: {len(program)} program bytes, {len(parameters)} parameter bytes",
        category="program"
    )
    return ProgramBundle(name=name, program=program, parameters=parameters)
