"""Parsing of ANSI escape sequences and extraction of colour spans."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntFlag
from typing import Callable, Optional


class Attr(IntFlag):
    """Text attributes carried by SGR sequences."""

    NONE = 0
    BOLD = 1
    DIM = 1 << 1
    ITALIC = 1 << 2
    UNDERLINE = 1 << 3
    BLINK = 1 << 4
    BLINK2 = 1 << 5
    REVERSE = 1 << 6
    STRIKE_THROUGH = 1 << 7
    BOLD_FORCE = 1 << 10


@dataclass(frozen=True)
class Url:
    """Target and parameters of an OSC 8 hyperlink."""

    uri: str
    params: str


@dataclass
class AnsiState:
    """Colours, attributes and hyperlink in effect at a point of the text.

    A colour of -1 means the terminal default; colours from 16 to 255 are
    palette indices and values from 1 << 24 upward are 24-bit RGB.
    """

    fg: int = -1
    bg: int = -1
    attr: Attr = Attr.NONE
    lbg: int = -1
    url: Optional[Url] = None

    def colored(self) -> bool:
        """True when the state differs from plain default text."""
        return (
            self.fg != -1
            or self.bg != -1
            or self.attr > 0
            or self.lbg >= 0
            or self.url is not None
        )

    def equals(self, other: Optional[AnsiState]) -> bool:
        """Compare with another state; None stands for plain text."""
        if other is None:
            return not self.colored()
        return (
            self.fg == other.fg
            and self.bg == other.bg
            and self.attr == other.attr
            and self.lbg == other.lbg
            and self.url is other.url
        )

    def to_string(self) -> str:
        """The escape sequence that reproduces this state, or "" for plain text."""
        if not self.colored():
            return ""

        ret = ""
        if self.attr & (Attr.BOLD | Attr.BOLD_FORCE):
            ret += "1;"
        for flag, code in (
            (Attr.DIM, "2;"),
            (Attr.ITALIC, "3;"),
            (Attr.UNDERLINE, "4;"),
            (Attr.BLINK, "5;"),
            (Attr.REVERSE, "7;"),
            (Attr.STRIKE_THROUGH, "9;"),
        ):
            if self.attr & flag:
                ret += code
        ret += _color_code(self.fg, 30) + ";" + _color_code(self.bg, 40) + ";"

        ret = "\x1b[" + ret.removesuffix(";") + "m"
        if self.url is not None:
            ret = f"\x1b]8;{self.url.params};{self.url.uri}\x1b\\{ret}\x1b]8;;\x1b"
        return ret


@dataclass
class AnsiOffset:
    """A span of characters [start, end) drawn in the given state."""

    start: int
    end: int
    color: AnsiState


def _color_code(color: int, offset: int) -> str:
    if color == -1:
        return str(offset + 9)
    if color < 8:
        return str(offset + color)
    if color < 16:
        return str(offset - 30 + 90 + color - 8)
    if color < 256:
        return f"{offset + 8};5;{color}"
    if color >= 1 << 24:
        red = (color >> 16) & 0xFF
        green = (color >> 8) & 0xFF
        blue = color & 0xFF
        return f"{offset + 8};2;{red};{green};{blue}"
    return ""


def _is_print(char: str) -> bool:
    return "\x20" <= char <= "\x7e"


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _match_control_sequence(text: str, base: int) -> int:
    # \x1b[\\[()][0-9;:?]*[a-zA-Z@], the two-character prefix already matched
    for idx in range(base + 2, len(text)):
        char = text[idx]
        if _is_digit(char) or char in ";:?":
            continue
        if "a" <= char <= "z" or "A" <= char <= "Z" or char == "@":
            return idx + 1
        return -1
    return -1


def _match_operating_system_command(text: str, base: int, start: int) -> int:
    # \x1b][0-9]+[;:][[:print:]]+(?:\x1b\\|\x07), matched from after the
    # first printable character
    length = len(text)
    idx = start
    while idx < length and _is_print(text[idx]):
        idx += 1
    if idx < length:
        if text[idx] == "\x07":
            return idx + 1
        if text[idx] == "\x1b" and idx + 1 < length and text[idx + 1] == "\\":
            return idx + 2
    # Closing part of a hyperlink: \x1b]8;;\x1b
    if idx < length and text[base : idx + 1] == "\x1b]8;;\x1b":
        return idx + 1
    return -1


def _next_escape(text: str, pos: int) -> Optional[tuple[int, int]]:
    length = len(text)
    idx = pos
    while idx < length:
        char = text[idx]
        if char == "\x08":
            # .\x08
            if idx > pos and text[idx - 1] != "\n":
                return idx - 1, idx + 1
        elif char == "\x1b":
            if idx + 2 < length and text[idx + 1] in "\\[()":
                end = _match_control_sequence(text, idx)
                if end != -1:
                    return idx, end

            if idx + 5 < length and text[idx + 1] == "]":
                j = idx + 2
                while j < length and _is_digit(text[j]):
                    j += 1
                if (
                    j > idx + 2
                    and j + 1 < length
                    and text[j] in ";:"
                    and _is_print(text[j + 1])
                ):
                    end = _match_operating_system_command(text, idx, j + 2)
                    if end != -1:
                        return idx, end

            # \x1b.
            if idx + 1 < length and text[idx + 1] != "\n":
                return idx, idx + 2
        elif char in "\x0e\x0f":
            return idx, idx + 1
        idx += 1
    return None


def next_ansi_escape_sequence(text: str) -> Optional[tuple[int, int]]:
    """Span (start, end) of the first escape sequence in *text*, or None."""
    return _next_escape(text, 0)


def parse_ansi_code(text: str) -> tuple[int, str]:
    """Split off the first numeric parameter of an SGR body.

    Returns the number (-1 when empty or not a plain non-negative integer)
    and the text after the separator.
    """
    remaining = ""
    idx = text.find(";")
    if idx < 0:
        idx = text.find(":")
    if idx >= 0:
        remaining = text[idx + 1 :]
        text = text[:idx]

    if not text:
        return -1, remaining
    code = 0
    for char in text:
        if not _is_digit(char):
            return -1, remaining
        code = code * 10 + ord(char) - ord("0")
    return code, remaining


def _interpret_other(code: str, prev_state: Optional[AnsiState], state: AnsiState) -> AnsiState:
    if prev_state is not None and code.endswith("0K"):
        state.lbg = prev_state.bg
    elif code.startswith("\x1b]8;") and (code.endswith("\x1b\\") or code.endswith("\a")):
        terminator = 1 if code.endswith("\a") else 2
        if len(code) == 5 + terminator and code[4] == ";":
            state.url = None
        else:
            params_end = code[4:].find(";")
            if params_end >= 0:
                params = code[4 : 4 + params_end]
                uri = code[5 + params_end : len(code) - terminator]
                state.url = Url(uri=uri, params=params)
    return state


def interpret_code(code: str, prev_state: Optional[AnsiState]) -> AnsiState:
    """The state that results from applying escape sequence *code* to *prev_state*."""
    if prev_state is None:
        state = AnsiState()
    else:
        state = replace(prev_state)

    if not (code.startswith("\x1b[") and code.endswith("m")):
        return _interpret_other(code, prev_state, state)

    if len(code) <= 3:
        state.fg = -1
        state.bg = -1
        state.attr = Attr.NONE
        return state

    body = code[2:-1]
    colors = {"fg": state.fg, "bg": state.bg}
    attr = state.attr
    target = "fg"
    stage = 0
    count = 0
    while body:
        num, body = parse_ansi_code(body)
        if num == -1:
            continue
        count += 1
        if stage == 0:
            if num == 38:
                target, stage = "fg", 1
            elif num == 48:
                target, stage = "bg", 1
            elif num == 39:
                colors["fg"] = -1
            elif num == 49:
                colors["bg"] = -1
            elif num == 1:
                attr |= Attr.BOLD
            elif num == 2:
                attr |= Attr.DIM
            elif num == 3:
                attr |= Attr.ITALIC
            elif num == 4:
                attr |= Attr.UNDERLINE
            elif num == 5:
                attr |= Attr.BLINK
            elif num == 7:
                attr |= Attr.REVERSE
            elif num == 9:
                attr |= Attr.STRIKE_THROUGH
            elif num == 22:
                attr &= ~(Attr.BOLD | Attr.DIM)
            elif num == 23:
                attr &= ~Attr.ITALIC
            elif num == 24:
                attr &= ~Attr.UNDERLINE
            elif num == 25:
                attr &= ~Attr.BLINK
            elif num == 27:
                attr &= ~Attr.REVERSE
            elif num == 29:
                attr &= ~Attr.STRIKE_THROUGH
            elif num == 0:
                colors["fg"] = -1
                colors["bg"] = -1
                attr = Attr.NONE
                stage = 0
            elif 30 <= num <= 37:
                colors["fg"] = num - 30
            elif 40 <= num <= 47:
                colors["bg"] = num - 40
            elif 90 <= num <= 97:
                colors["fg"] = num - 90 + 8
            elif 100 <= num <= 107:
                colors["bg"] = num - 100 + 8
        elif stage == 1:
            if num == 2:
                stage = 10  # 24-bit colour follows
            elif num == 5:
                stage = 2
            else:
                stage = 0
        elif stage == 2:
            colors[target] = num
            stage = 0
        elif stage == 10:
            colors[target] = (1 << 24) | (num << 16)
            stage = 11
        elif stage == 11:
            colors[target] |= num << 8
            stage = 12
        elif stage == 12:
            colors[target] |= num
            stage = 0

    if count == 0:
        # Empty sequence: reset
        colors["fg"] = -1
        colors["bg"] = -1
        attr = Attr.NONE

    if stage > 0:
        colors[target] = -1

    state.fg = colors["fg"]
    state.bg = colors["bg"]
    state.attr = attr
    return state


def extract_color(
    text: str,
    state: Optional[AnsiState],
    proc: Optional[Callable[[str, Optional[AnsiState]], bool]] = None,
) -> tuple[str, Optional[list[AnsiOffset]], Optional[AnsiState]]:
    """Strip escape sequences from *text* and record where each colour applies.

    *state* is the state carried over from the previous line. *proc*, when
    given, is called with every plain-text segment and the state it is drawn
    in; returning False from it aborts and yields ("", None, None).

    Returns the stripped text, the colour spans (None when there are none)
    and the state in effect at the end of the line.
    """
    offsets: list[AnsiOffset] = []
    if state is not None:
        offsets.append(AnsiOffset(0, 0, replace(state)))

    output: list[str] = []
    prev_idx = 0
    char_count = 0
    idx = 0
    while idx < len(text):
        span = _next_escape(text, idx)
        if span is None:
            break
        start, idx = span

        prev = text[prev_idx:start]
        if proc is not None and not proc(prev, state):
            return "", None, None
        prev_idx = idx

        if prev:
            char_count += len(prev)
            output.append(prev)

        new_state = interpret_code(text[start:idx], state)
        if not new_state.equals(state):
            if state is not None:
                offsets[-1].end = char_count
            if new_state.colored():
                state = new_state
                offsets.append(AnsiOffset(char_count, char_count, new_state))
            else:
                state = None

    if prev_idx == 0:
        rest = text
        trimmed = text
    else:
        rest = text[prev_idx:]
        output.append(rest)
        trimmed = "".join(output)

    if proc is not None:
        proc(rest, state)

    if offsets:
        if rest and state is not None:
            char_count += len(rest)
            offsets[-1].end = char_count
        return trimmed, offsets, state
    return trimmed, None, state