import logging
import re
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..errors import ScoreSyntaxError
from .note_mapper import meta_from_options, note_from_options, parse_number
from .types import MetaData, Note, Score

_LOG = logging.getLogger("scoresynth.parser")

# a comment starts at a # that opens the line or follows whitespace, so C#5 survives
_COMMENT = re.compile(r"(?:^|\s)#")

Options = List[Tuple[str, str]]


@dataclass(frozen=True)
class Command:
    name: str
    options: Options
    line_number: int


def tokenize(lines: Iterable[str]) -> Iterable[Command]:
    """Split score text into commands, dropping blank lines and ``#`` comments."""
    for line_number, line in enumerate(lines, start=1):
        text = _COMMENT.split(line, 1)[0].strip()
        if not text:
            continue
        head, *tokens = text.split()
        options: Options = []
        for token in tokens:
            key, sep, value = token.partition("=")
            if not sep or not key:
                _LOG.warning("line %d: ignoring token %r, expected key=value", line_number, token)
                continue
            options.append((key, value))
        yield Command(head.upper(), options, line_number)


@dataclass(frozen=True)
class Standard:
    """Every NOTE emits exactly one note."""


@dataclass(frozen=True)
class Repeat:
    """Every NOTE emits ``number`` copies spaced ``time`` beats apart."""

    time: float
    number: int
    origin: float  # cursor when the block opened


RepeatMode = Union[Standard, Repeat]


@dataclass
class ParserContext:
    """Mutable state threaded through every command handler."""

    template: Note = field(default_factory=Note)
    meta: MetaData = field(default_factory=MetaData)
    mode: RepeatMode = field(default_factory=Standard)
    cursor: float = 0.0  # beats, where the next NOTE without start= begins
    notes: List[Note] = field(default_factory=list)

    def to_score(self) -> Score:
        return Score(notes=list(self.notes), meta=replace(self.meta))


def _warn_unknown(command: Command, unknown: List[str]) -> None:
    for key in unknown:
        _LOG.warning("line %d: %s ignores unknown option %r", command.line_number, command.name, key)


def _handle_meta(context: ParserContext, command: Command) -> None:
    meta, unknown = meta_from_options(context.meta, command.options)
    _warn_unknown(command, unknown)
    context.meta = meta


def _handle_default(context: ParserContext, command: Command) -> None:
    template, unknown = note_from_options(context.template, command.options)
    _warn_unknown(command, unknown)
    context.template = template


def _handle_note(context: ParserContext, command: Command) -> None:
    seeded = replace(context.template, start=context.cursor)
    note, unknown = note_from_options(seeded, command.options)
    _warn_unknown(command, unknown)

    mode = context.mode
    if isinstance(mode, Repeat):
        context.notes.extend(note.delayed_by(i * mode.time) for i in range(mode.number))
    else:
        context.notes.append(note)
    context.cursor = note.start + note.duration


def _handle_repeat(context: ParserContext, command: Command) -> None:
    if isinstance(context.mode, Repeat):
        _LOG.warning("line %d: ignoring REPEAT nested inside an open REPEAT", command.line_number)
        return
    time: Optional[float] = None
    number: Optional[int] = None
    for key, raw in command.options:
        lowered = key.lower()
        if lowered == "time":
            time = parse_number("time", raw)
            if time <= 0:
                raise ScoreSyntaxError(f"time must be positive, got {raw!r}")
        elif lowered == "number":
            value = parse_number("number", raw)
            if value < 1 or value != int(value):
                raise ScoreSyntaxError(f"number must be a whole count of at least 1, got {raw!r}")
            number = int(value)
        else:
            _warn_unknown(command, [key])
    if time is None or number is None:
        raise ScoreSyntaxError("REPEAT needs both time= and number=")
    context.mode = Repeat(time=time, number=number, origin=context.cursor)


def _close_repeat(context: ParserContext) -> None:
    mode = context.mode
    if not isinstance(mode, Repeat):
        return
    last_copy_end = context.cursor + (mode.number - 1) * mode.time
    context.cursor = max(mode.origin + mode.number * mode.time, last_copy_end)
    context.mode = Standard()


def _handle_end_repeat(context: ParserContext, command: Command) -> None:
    if not isinstance(context.mode, Repeat):
        _LOG.warning("line %d: END_REPEAT without an open REPEAT", command.line_number)
        return
    if command.options:
        _warn_unknown(command, [key for key, _ in command.options])
    _close_repeat(context)


HANDLERS: Dict[str, Callable[[ParserContext, Command], None]] = {
    "META": _handle_meta,
    "DEFAULT": _handle_default,
    "NOTE": _handle_note,
    "REPEAT": _handle_repeat,
    "END_REPEAT": _handle_end_repeat,
}


def apply_command(context: ParserContext, command: Command) -> None:
    handler = HANDLERS.get(command.name)
    if handler is None:
        _LOG.warning("line %d: ignoring unknown command %r", command.line_number, command.name)
        return
    try:
        handler(context, command)
    except ScoreSyntaxError as exc:
        if exc.line_number is None:
            raise ScoreSyntaxError(str(exc), command.line_number) from None
        raise


def parse_score(lines: Iterable[str], strict: bool = False) -> Score:
    """Build a Score from score text.

    A command with a bad value is skipped with a warning and the previous
    state is kept. With ``strict`` the first bad command aborts parsing.
    """
    context = ParserContext()
    for command in tokenize(lines):
        try:
            apply_command(context, command)
        except ScoreSyntaxError as exc:
            if strict:
                raise
            _LOG.warning("skipping %s: %s", command.name, exc)

    if isinstance(context.mode, Repeat):
        _LOG.warning("REPEAT block left open at end of score; closing it")
        _close_repeat(context)

    score = context.to_score()
    _LOG.info(
        "parsed %d notes (tempo=%g bpm, length=%s beats)",
        len(score.notes),
        score.meta.tempo,
        "auto" if score.meta.length is None else f"{score.meta.length:g}",
    )
    return score


def parse_score_text(text: str, strict: bool = False) -> Score:
    return parse_score(text.splitlines(), strict=strict)
