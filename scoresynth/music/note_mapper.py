import math
import re
from dataclasses import replace
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..errors import ScoreSyntaxError
from .oscillators import WaveForm, WaveKind
from .types import MetaData, Note

NOTE_OFFSETS: Dict[str, int] = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
ACCIDENTALS: Dict[str, int] = {"": 0, "#": 1, "s": 1, "b": -1, "f": -1, "##": 2, "bb": -2}
_NOTE_NAME = re.compile(r"^([A-Ga-g])(##|bb|#|b|s|f)?(-?\d+)$")

WAVE_ALIASES: Dict[str, WaveKind] = {
    "square": WaveKind.SQUARE,
    "triangle": WaveKind.TRIANGLE,
    "sine": WaveKind.SINE,
    "sawtooth": WaveKind.SAWTOOTH,
    "saw": WaveKind.SAWTOOTH,
    "noise": WaveKind.NOISE,
}

_NONE_VALUES = ("none", "off", "-")


def midi_to_frequency(midi_note: int) -> float:
    return 440.0 * math.pow(2, (midi_note - 69) / 12)


def note_name_to_midi(name: str) -> int:
    match = _NOTE_NAME.match(name.strip())
    if not match:
        raise ValueError(f"not a note name: {name!r}")
    letter, accidental, octave = match.groups()
    return (int(octave) + 1) * 12 + NOTE_OFFSETS[letter.upper()] + ACCIDENTALS[accidental or ""]


def note_name_to_frequency(name: str) -> float:
    return midi_to_frequency(note_name_to_midi(name))


def parse_number(key: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ScoreSyntaxError(f"{key}={raw!r} is not a number") from None
    if not math.isfinite(value):
        raise ScoreSyntaxError(f"{key}={raw!r} must be finite")
    return value


def parse_frequency(key: str, raw: str) -> float:
    if _NOTE_NAME.match(raw.strip()):
        return note_name_to_frequency(raw)
    value = parse_number(key, raw)
    if value <= 0:
        raise ScoreSyntaxError(f"{key} must be a positive frequency, got {raw!r}")
    return value


def parse_waveform(raw: str) -> WaveForm:
    name, _, argument = raw.strip().lower().partition(":")
    if name in WAVE_ALIASES and not argument:
        return WaveForm(WAVE_ALIASES[name])
    if name == "pulse":
        ratio = parse_number("pulse ratio", argument or "0.5")
        if not 0.0 < ratio < 1.0:
            raise ScoreSyntaxError(f"pulse ratio must lie strictly between 0 and 1, got {ratio:g}")
        return WaveForm.pulse(ratio)
    if name == "harmonics":
        if not argument:
            raise ScoreSyntaxError("harmonics needs at least one weight, e.g. harmonics:1,0.5")
        weights = [parse_number("harmonic weight", part) for part in argument.split(",")]
        if any(w < 0 for w in weights) or sum(weights) <= 0:
            raise ScoreSyntaxError("harmonic weights must be non-negative with a positive sum")
        return WaveForm.harmonics(weights)
    raise ScoreSyntaxError(f"unknown waveform {raw!r}")


def _optional_frequency(key: str, raw: str) -> Optional[float]:
    if raw.strip().lower() in _NONE_VALUES:
        return None
    return parse_frequency(key, raw)


def _unit_interval(key: str, raw: str) -> float:
    value = parse_number(key, raw)
    if not 0.0 <= value <= 1.0:
        raise ScoreSyntaxError(f"{key} must lie in [0, 1], got {raw!r}")
    return value


def _non_negative(key: str, raw: str) -> float:
    value = parse_number(key, raw)
    if value < 0:
        raise ScoreSyntaxError(f"{key} must not be negative, got {raw!r}")
    return value


def _positive(key: str, raw: str) -> float:
    value = parse_number(key, raw)
    if value <= 0:
        raise ScoreSyntaxError(f"{key} must be positive, got {raw!r}")
    return value


def _vibrato(key: str, raw: str) -> Optional[float]:
    if raw.strip().lower() in _NONE_VALUES:
        return None
    # a zero-rate LFO has no period
    return _positive(key, raw)


# key -> (Note field, converter)
NOTE_FIELDS: Dict[str, Tuple[str, Callable[[str, str], object]]] = {
    "wave": ("waveform", lambda _key, raw: parse_waveform(raw)),
    "waveform": ("waveform", lambda _key, raw: parse_waveform(raw)),
    "volume": ("volume", _unit_interval),
    "freq": ("frequency", parse_frequency),
    "frequency": ("frequency", parse_frequency),
    "note": ("frequency", parse_frequency),
    "glide": ("glide", _optional_frequency),
    "vibrato": ("vibrato", _vibrato),
    "vibrato_depth": ("vibrato_depth", _non_negative),
    "duration": ("duration", _positive),
    "start": ("start", _non_negative),
    "attack": ("attack", _non_negative),
    "decay": ("decay", _non_negative),
    "sustain": ("sustain", _unit_interval),
    "release": ("release", _non_negative),
}

META_FIELDS: Dict[str, Tuple[str, Callable[[str, str], object]]] = {
    "tempo": ("tempo", _positive),
    "length": ("length", _positive),
}


def _collect(
    options: Sequence[Tuple[str, str]],
    fields: Mapping[str, Tuple[str, Callable[[str, str], object]]],
) -> Tuple[Dict[str, object], List[str]]:
    updates: Dict[str, object] = {}
    unknown: List[str] = []
    for key, raw in options:
        entry = fields.get(key.lower())
        if entry is None:
            unknown.append(key)
            continue
        attribute, convert = entry
        updates[attribute] = convert(key.lower(), raw)
    return updates, unknown


def note_from_options(template: Note, options: Sequence[Tuple[str, str]]) -> Tuple[Note, List[str]]:
    """Apply ``key=value`` options to ``template``.

    Returns the new note and the keys that were not recognised. Raises
    ScoreSyntaxError before touching anything if any value is invalid.
    """
    updates, unknown = _collect(options, NOTE_FIELDS)
    return replace(template, **updates), unknown


def meta_from_options(meta: MetaData, options: Sequence[Tuple[str, str]]) -> Tuple[MetaData, List[str]]:
    updates, unknown = _collect(options, META_FIELDS)
    return replace(meta, **updates), unknown
