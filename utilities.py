#  Copyright 2019 Martin Haesemeyer. All rights reserved.
#
# Licensed under the MIT license

"""
Module with general utility functions and classes
"""


class SWCException(Exception):
    """
    Exception to signal that invalid operation was performed on swc data
    """
    def __init__(self, message: str):
        super().__init__(message)


def ui_get_file(filetypes=None, multiple=False):
    """
    Shows a file selection dialog and returns the path to the selected file(s)
    """
    import tkinter
    import tkinter.filedialog as tk_file_dialog
    if filetypes is None:
        filetypes = [('SWC tracing', '.swc')]
    options = {'filetypes': filetypes, 'multiple': multiple}
    tkinter.Tk().withdraw()  # Close the root window
    return tk_file_dialog.askopenfilename(**options)


def decode_buffer(buffer) -> str:
    """
    Turns raw file content into text without transcoding: every byte maps onto the character with the same ordinal
    :param buffer: bytes-like content or already decoded text
    :return: The text
    """
    if isinstance(buffer, str):
        return buffer
    return bytes(buffer).decode('latin-1')


def encode_text(text: str) -> bytes:
    """
    Inverse of decode_buffer. Text that did not come from decode_buffer and holds characters beyond latin-1
    is written as utf-8
    """
    try:
        return text.encode('latin-1')
    except UnicodeEncodeError:
        return text.encode('utf-8')


def read_file_buffer(file_name: str) -> bytes:
    """
    Reads the complete content of a file into memory
    :param file_name: The file path and name
    :return: The unmodified file content
    """
    with open(file_name, 'rb') as in_file:
        return in_file.read()

