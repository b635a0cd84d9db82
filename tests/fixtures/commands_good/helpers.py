"""Shared helpers; exports no command."""


def shout(text):
    return text.upper()
