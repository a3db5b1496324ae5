from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

logger = logging.getLogger("valuta")

DECIMALS = 2

# Sima tizedes alak: előjel, egész/tört rész, opcionális kitevő. Nincs '_', 'nan', 'inf'.
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class ConfigurationError(ValueError):
    """Hibás beállítás (pl. nulla árfolyam) – induláskor jelezzük, nem gépelés közben."""


class SynchronizerClosedError(RuntimeError):
    """A szinkronizáló már le lett bontva (dispose)."""


# --- Szám beolvasás / formázás ---
def parse_decimal(text: Optional[str]) -> Optional[float]:
    """Szövegből szám; üres vagy hibás bemenetre None (nem hiba)."""
    if text is None:
        return None
    s = text.strip()
    if not _NUMBER_RE.fullmatch(s):
        return None
    value = float(s)
    if not math.isfinite(value):
        return None
    return value


def format_fixed(value: float, decimals: int = DECIMALS) -> str:
    return f"{value:.{decimals}f}"


# --- Konverziós pár ---
@dataclass(frozen=True)
class ConversionPair:
    forward: Callable[[float], float]
    inverse: Callable[[float], float]


def rate_pair(rate) -> ConversionPair:
    """
    Lineáris árfolyam-pár: forward(x) = x * rate, inverse(y) = y / rate.
    Nulla, negatív vagy nem véges árfolyam -> ConfigurationError.
    """
    try:
        r = float(rate)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Az árfolyam nem szám: {rate!r}")
    if not math.isfinite(r) or r <= 0:
        raise ConfigurationError(f"Az árfolyamnak pozitív, véges számnak kell lennie: {rate!r}")
    return ConversionPair(forward=lambda x: x * r, inverse=lambda y: y / r)


# --- Mező állapot ---
@dataclass
class Field:
    name: str
    text: str = ""
    active: bool = False
    # utolsó programozott (csendes) írás – visszhang szűréshez
    last_written: Optional[str] = None


Listener = Callable[[str, str], None]


class FieldSynchronizer:
    """
    Két mező kétirányú szinkronja.

    Két csatorna van:
      - felhasználói változás: on_field_changed / on_field_a_changed / on_field_b_changed,
      - megjelenítési írás: a listenerek kapják meg (name, text) formában.
    A megjelenítési írás soha nem hívja vissza a változás-kezelőt, így egy
    felhasználói szerkesztés pontosan egy lépésben ér véget.
    """

    def __init__(
        self,
        pair: ConversionPair,
        field_a: str = "a",
        field_b: str = "b",
        decimals: int = DECIMALS,
    ):
        if field_a == field_b:
            raise ConfigurationError("A két mező neve nem lehet azonos.")
        self.pair = pair
        self.decimals = decimals
        self.field_a = field_a
        self.field_b = field_b
        self._fields: Dict[str, Field] = {
            field_a: Field(field_a),
            field_b: Field(field_b),
        }
        self._listeners: List[Listener] = []
        self._closed = False
        logger.info("Synchronizer created for %s <-> %s", field_a, field_b)

    # --- Erőforrás kezelés ---
    def __enter__(self) -> "FieldSynchronizer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def dispose(self) -> None:
        if self._closed:
            return
        self._listeners.clear()
        self._closed = True
        logger.info("Synchronizer disposed (%s <-> %s)", self.field_a, self.field_b)

    @property
    def closed(self) -> bool:
        return self._closed

    def add_listener(self, callback: Listener) -> Callable[[], None]:
        """Megjelenítési írások figyelése; a visszaadott függvény leiratkoztat."""
        self._check_open()
        self._listeners.append(callback)

        def remove() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove

    # --- Lekérdezés ---
    def text(self, name: str) -> str:
        return self._field(name).text

    @property
    def active_editor(self) -> Optional[str]:
        for f in self._fields.values():
            if f.active:
                return f.name
        return None

    # --- Fókusz ---
    def set_active_editor(self, name: str) -> None:
        self._check_open()
        target = self._field(name)
        for f in self._fields.values():
            f.active = f is target

    def clear_active_editor(self, name: Optional[str] = None) -> None:
        self._check_open()
        for f in self._fields.values():
            if name is None or f.name == name:
                f.active = False

    # --- Kezdőérték ---
    def set_initial_value(self, name: str, text: str) -> None:
        """Egyszeri kezdőérték: nem kell aktívnak lennie, és nem indít konverziót."""
        self._check_open()
        f = self._field(name)
        f.text = text
        f.last_written = None

    # --- Változás-kezelők ---
    def on_field_a_changed(self, text: str) -> Optional[str]:
        return self.on_field_changed(self.field_a, text)

    def on_field_b_changed(self, text: str) -> Optional[str]:
        return self.on_field_changed(self.field_b, text)

    def on_field_changed(self, name: str, text: str) -> Optional[str]:
        """
        Egy mező változásának feldolgozása.
        Visszatér: a másik mezőbe írt szöveg, vagy None ha nem történt írás.
        """
        self._check_open()
        source = self._field(name)
        source.text = text

        # hurok-megszakító: csak az aktív szerkesztő indíthat konverziót
        if not source.active:
            return None
        # a saját csendes írásunk visszhangja
        if source.last_written is not None and text == source.last_written:
            source.last_written = None
            return None
        source.last_written = None

        return self._propagate(source)

    def resync(self) -> Optional[str]:
        """Konverzió újrafuttatása az aktív mező aktuális szövegéből."""
        self._check_open()
        name = self.active_editor
        if name is None:
            return None
        return self._propagate(self._fields[name])

    # --- Belső ---
    def _propagate(self, source: Field) -> Optional[str]:
        value = parse_decimal(source.text)
        if value is None:
            logger.debug("Ignoring non-numeric input in %s: %r", source.name, source.text)
            return None

        if source.name == self.field_a:
            target = self._fields[self.field_b]
            converted = self.pair.forward(value)
        else:
            target = self._fields[self.field_a]
            converted = self.pair.inverse(value)

        out = format_fixed(converted, self.decimals)
        self._write_silently(target, out)
        return out

    def _write_silently(self, target: Field, text: str) -> None:
        # az aktív jelzőhöz nem nyúlunk
        target.text = text
        target.last_written = text
        logger.debug("Silent write %s = %s", target.name, text)
        for callback in list(self._listeners):
            callback(target.name, text)

    def _field(self, name: str) -> Field:
        try:
            return self._fields[name]
        except KeyError:
            raise ConfigurationError(f"Ismeretlen mező: {name!r}")

    def _check_open(self) -> None:
        if self._closed:
            raise SynchronizerClosedError("A szinkronizáló már le lett bontva.")
