import json
import logging
import re
from math import floor, log10, pi
from typing import Iterable, Sequence

from satwatch.core.juliandate import JulianDate
from satwatch.orbit.exceptions import TLEException, FormatError, ChecksumError, RangeError
from satwatch.util.constants import EARTH_MU, EARTH_EQUATORIAL_RADIUS, MAX_MEAN_MOTION, MINUTES_PER_DAY, \
    SECONDS_PER_DAY

logger = logging.getLogger(__name__)

TLE_LINE_LENGTH = 69
DEFAULT_NAME = 'UNKNOWN'

# Alpha-5 catalog numbers replace the leading digit with a letter, skipping I and O.
_ALPHA5_LETTERS = 'ABCDEFGHJKLMNPQRSTUVWXYZ'
_PACKED_PATTERN = re.compile(r'^([ +-])(\d{5})([ +-])(\d)$')
_DATA_LINE_PATTERN = re.compile(r'^[12] [0-9A-Z]\d{4}')
# fixed-column decimal fields, with optional sign and leading or trailing blanks
_NUMBER_PATTERN = re.compile(r'^ *[+-]?(\d+\.?\d*|\.\d+) *$', re.ASCII)


def computeChecksum(line: str) -> int:
    """Computes the modulo 10 checksum of the first 68 columns of an element set line. Digits count their value and
    each '-' counts as 1, all other characters are ignored."""

    checksum = 0
    for ch in line[:68]:
        if ch in '0123456789':
            checksum += int(ch)
        elif ch == '-':
            checksum += 1
    return checksum % 10


def _parseCatalogNumber(text: str, line: int) -> int:
    first = text[0]
    if first in _ALPHA5_LETTERS:
        rest = text[1:]
        if not rest.isdigit():
            raise FormatError(f'invalid catalog number: {text!r}', line, 'catalogNumber')
        return (_ALPHA5_LETTERS.index(first) + 10) * 10000 + int(rest)

    text = text.strip()
    if not text.isdigit():
        raise FormatError(f'invalid catalog number: {text!r}', line, 'catalogNumber')
    return int(text)


def _formatCatalogNumber(number: int) -> str:
    if number < 0 or number > 339999:
        raise ValueError(f'catalog number must be between 0 and 339999, not {number}')
    if number < 100000:
        return f'{number:05d}'

    prefix, rest = divmod(number, 10000)
    return f'{_ALPHA5_LETTERS[prefix - 10]}{rest:04d}'


def _parseFloat(text: str, line: int, field: str) -> float:
    if _NUMBER_PATTERN.match(text) is None:
        raise FormatError(f'invalid value for {field}: {text!r}', line, field)
    return float(text)


def _parseInt(text: str, line: int, field: str, default: int = None) -> int:
    text = text.strip()
    if not text and default is not None:
        return default
    if not text.isdigit():
        raise FormatError(f'invalid value for {field}: {text!r}', line, field)
    return int(text)


def parsePackedExponent(text: str, line: int = 1, field: str = 'bstar') -> float:
    """Parses the packed exponential notation of an element set, where ' 12345-3' means 0.12345e-3."""

    match = _PACKED_PATTERN.match(text)
    if match is None:
        raise FormatError(f'invalid packed exponent for {field}: {text!r}', line, field)

    sign, mantissa, exponentSign, exponent = match.groups()
    sign = '-' if sign == '-' else ''
    exponentSign = '-' if exponentSign == '-' else ''

    return float(f'{sign}0.{mantissa}e{exponentSign}{exponent}')


def formatPackedExponent(value: float) -> str:
    """Formats a value in the 8 column packed exponential notation of an element set."""

    if value == 0.0:
        return ' 00000-0'

    exponent = floor(log10(abs(value))) + 1
    mantissa = round(abs(value) / 10 ** exponent * 100000)
    if mantissa >= 100000:
        mantissa //= 10
        exponent += 1
    if abs(exponent) > 9:
        raise ValueError(f'value {value} can not be packed into a single exponent digit')

    sign = '-' if value < 0 else ' '
    exponentSign = '-' if exponent < 0 else '+'
    return f'{sign}{mantissa:05d}{exponentSign}{abs(exponent)}'


def _formatMeanMotionDot(value: float) -> str:
    if abs(value) >= 1.0:
        raise ValueError(f'first derivative of mean motion must be less than 1, not {value}')

    # '0.00001234' -> '.00001234'
    text = f'{abs(value):.8f}'[1:]
    return ('-' if value < 0 else ' ') + text


def _checkRange(value: float, low: float, high: float, line: int, field: str, highInclusive: bool = True):
    valid = low <= value <= high if highInclusive else low <= value < high
    if not valid:
        closing = ']' if highInclusive else ')'
        raise RangeError(f'{field} must be in [{low}, {high}{closing}, not {value}', line, field, value)


class TwoLineElement:
    """An implementation of the NORAD two-line element sets used by the SGP4 and SDP4 models to propagate satellite
    state vectors. The data are 'mean elements' and only make sense when used with the appropriate model.

    The element set is created from a string of two or three lines, the optional first line being the name of the
    object. Validation is done line by line in the order of line count and length, checksum, column formats and
    finally physical ranges, raising FormatError, ChecksumError and RangeError respectively."""

    __slots__ = ('_name', '_line1', '_line2', '_catalogNumber', '_classification', '_designator', '_epochYear',
                 '_epochDay', '_epoch', '_meanMotionDot', '_meanMotionDDot', '_bstar', '_ephemerisType',
                 '_setNumber', '_inclination', '_raan', '_eccentricity', '_argumentOfPerigee', '_meanAnomaly',
                 '_meanMotion', '_revolutionNumber', '_checksums')

    def __init__(self, tle: str):
        lines = [line.strip() for line in tle.splitlines() if line.strip()]

        if len(lines) == 2:
            name = DEFAULT_NAME
            line1, line2 = lines
        elif len(lines) == 3:
            name, line1, line2 = lines
            # 3LE catalogs prefix the name line with a zero
            if name.startswith('0 '):
                name = name[2:].strip()
        else:
            raise FormatError(f'element set must have 2 or 3 lines, not {len(lines)}')

        self._name = name
        self._line1 = line1
        self._line2 = line2

        for number, line in enumerate((line1, line2), 1):
            self._validateLine(line, number)

        self._parseLine1(line1)
        self._parseLine2(line2)
        self._checkRanges()

    @staticmethod
    def _validateLine(line: str, number: int):
        if len(line) != TLE_LINE_LENGTH:
            raise FormatError(f'line {number} must be {TLE_LINE_LENGTH} characters, not {len(line)}', number)
        if not line.isascii():
            raise FormatError(f'line {number} contains characters that are not ASCII', number)

        if not line[68].isdigit():
            raise FormatError(f'line {number} checksum column is not a digit: {line[68]!r}', number, 'checksum')
        expected = computeChecksum(line)
        actual = int(line[68])
        if expected != actual:
            raise ChecksumError(f'checksum of line {number} is {actual}, computed {expected}', number, expected,
                                actual)

        if line[0] != str(number) or line[1] != ' ':
            raise FormatError(f'line {number} must begin with {number!r}: {line[:2]!r}', number, 'lineNumber')

    def _parseLine1(self, line: str):
        self._catalogNumber = _parseCatalogNumber(line[2:7], 1)
        self._classification = line[7]
        if self._classification not in 'UCS ':
            raise FormatError(f'invalid classification: {self._classification!r}', 1, 'classification')
        self._classification = self._classification.strip() or 'U'
        self._designator = line[9:17].strip()

        epochYear = _parseInt(line[18:20], 1, 'epochYear')
        self._epochYear = epochYear + 2000 if epochYear < 57 else epochYear + 1900
        self._epochDay = _parseFloat(line[20:32], 1, 'epochDay')

        self._meanMotionDot = _parseFloat(line[33:43], 1, 'meanMotionDot')
        self._meanMotionDDot = parsePackedExponent(line[44:52], 1, 'meanMotionDDot')
        self._bstar = parsePackedExponent(line[53:61], 1, 'bstar')
        self._ephemerisType = _parseInt(line[62], 1, 'ephemerisType', 0)
        self._setNumber = _parseInt(line[64:68], 1, 'setNumber', 0)

    def _parseLine2(self, line: str):
        catalogNumber = _parseCatalogNumber(line[2:7], 2)
        if catalogNumber != self._catalogNumber:
            raise FormatError(f'catalog numbers differ between lines: {self._catalogNumber} and {catalogNumber}',
                              2, 'catalogNumber')

        self._inclination = _parseFloat(line[8:16], 2, 'inclination')
        self._raan = _parseFloat(line[17:25], 2, 'raan')

        eccentricity = line[26:33]
        if not eccentricity.isdigit():
            raise FormatError(f'invalid value for eccentricity: {eccentricity!r}', 2, 'eccentricity')
        self._eccentricity = float('0.' + eccentricity)

        self._argumentOfPerigee = _parseFloat(line[34:42], 2, 'argumentOfPerigee')
        self._meanAnomaly = _parseFloat(line[43:51], 2, 'meanAnomaly')
        self._meanMotion = _parseFloat(line[52:63], 2, 'meanMotion')
        self._revolutionNumber = _parseInt(line[63:68], 2, 'revolutionNumber', 0)
        self._checksums = (int(self._line1[68]), int(line[68]))

    def _checkRanges(self):
        if not 1.0 <= self._epochDay < 367.0:
            raise RangeError(f'epochDay must be in [1, 367), not {self._epochDay}', 1, 'epochDay', self._epochDay)
        self._epoch = JulianDate.fromEpoch(self._epochYear, self._epochDay)

        _checkRange(self._inclination, 0.0, 180.0, 2, 'inclination')
        _checkRange(self._raan, 0.0, 360.0, 2, 'raan')
        _checkRange(self._eccentricity, 0.0, 1.0, 2, 'eccentricity', False)
        _checkRange(self._argumentOfPerigee, 0.0, 360.0, 2, 'argumentOfPerigee')
        _checkRange(self._meanAnomaly, 0.0, 360.0, 2, 'meanAnomaly')
        if not 0.0 < self._meanMotion <= MAX_MEAN_MOTION:
            raise RangeError(f'meanMotion must be in (0, {MAX_MEAN_MOTION}], not {self._meanMotion}', 2,
                             'meanMotion', self._meanMotion)

    def __str__(self) -> str:
        """Returns the element set as text, including the name line."""

        return f'{self._name}\n{self._line1}\n{self._line2}'

    def __repr__(self) -> str:
        return f'TwoLineElement({str(self)!r})'

    def __eq__(self, other: 'TwoLineElement') -> bool:
        if isinstance(other, TwoLineElement):
            return (self._name, self._line1, self._line2) == (other._name, other._line1, other._line2)
        return NotImplemented

    def __hash__(self):
        return hash((self._name, self._line1, self._line2))

    def toDict(self) -> dict:
        return {"name": self._name, "catalogNumber": self._catalogNumber, "classification": self._classification,
                "designator": self._designator, "epoch": self._epoch.toDict(), "epochYear": self._epochYear,
                "epochDay": self._epochDay, "meanMotionDot": self._meanMotionDot,
                "meanMotionDDot": self._meanMotionDDot, "bstar": self._bstar, "ephemerisType": self._ephemerisType,
                "setNumber": self._setNumber, "inclination": self._inclination, "raan": self._raan,
                "eccentricity": self._eccentricity, "argumentOfPerigee": self._argumentOfPerigee,
                "meanAnomaly": self._meanAnomaly, "meanMotion": self._meanMotion,
                "revolutionNumber": self._revolutionNumber}

    def toJson(self) -> str:
        return json.dumps(self, default=lambda o: o.toDict())

    @property
    def name(self) -> str:
        return self._name

    @property
    def line1(self) -> str:
        return self._line1

    @property
    def line2(self) -> str:
        return self._line2

    @property
    def catalogNumber(self) -> int:
        return self._catalogNumber

    @property
    def classification(self) -> str:
        """U: unclassified, C: classified, S: secret."""
        return self._classification

    @property
    def designator(self) -> str:
        """International designator (COSPAR id) of the form YYNNNPPP: launch year, launch number of the year and
        piece of the launch."""
        return self._designator

    @property
    def epochYear(self) -> int:
        return self._epochYear

    @property
    def epochDay(self) -> float:
        return self._epochDay

    @property
    def epoch(self) -> JulianDate:
        return self._epoch

    @property
    def meanMotionDot(self) -> float:
        """First derivative of mean motion divided by two, in revolutions per day squared."""
        return self._meanMotionDot

    @property
    def meanMotionDDot(self) -> float:
        """Second derivative of mean motion divided by six, in revolutions per day cubed."""
        return self._meanMotionDDot

    @property
    def bstar(self) -> float:
        """Drag term in inverse earth radii."""
        return self._bstar

    @property
    def ephemerisType(self) -> int:
        return self._ephemerisType

    @property
    def setNumber(self) -> int:
        return self._setNumber

    @property
    def inclination(self) -> float:
        return self._inclination

    @property
    def raan(self) -> float:
        return self._raan

    @property
    def eccentricity(self) -> float:
        return self._eccentricity

    @property
    def argumentOfPerigee(self) -> float:
        return self._argumentOfPerigee

    @property
    def meanAnomaly(self) -> float:
        return self._meanAnomaly

    @property
    def meanMotion(self) -> float:
        """Mean motion in revolutions per day."""
        return self._meanMotion

    @property
    def revolutionNumber(self) -> int:
        return self._revolutionNumber

    @property
    def checksums(self) -> (int, int):
        return self._checksums

    @property
    def semiMajorAxis(self) -> float:
        """Semi-major axis in kilometers computed from the mean motion with Kepler's third law."""

        meanMotion = self._meanMotion * 2 * pi / SECONDS_PER_DAY
        return (EARTH_MU / (meanMotion * meanMotion)) ** (1.0 / 3.0)

    @property
    def period(self) -> float:
        """Orbital period in minutes."""
        return MINUTES_PER_DAY / self._meanMotion

    @property
    def perigee(self) -> float:
        """Perigee altitude above the equatorial radius in kilometers."""
        return self.semiMajorAxis * (1.0 - self._eccentricity) - EARTH_EQUATORIAL_RADIUS

    @property
    def apogee(self) -> float:
        """Apogee altitude above the equatorial radius in kilometers."""
        return self.semiMajorAxis * (1.0 + self._eccentricity) - EARTH_EQUATORIAL_RADIUS


def parseTle(lines: str | Sequence[str]) -> TwoLineElement:
    """Parses two or three lines of text into a TwoLineElement. The lines can be a single string or a sequence of
    strings."""

    if isinstance(lines, str):
        return TwoLineElement(lines)
    return TwoLineElement('\n'.join(lines))


class TLEGroupIterator:
    """Iterates over the lines of a catalog, yielding the text of each element set. A line that is not a data line
    is taken to be the name of the following element set."""

    __slots__ = '_lines', '_n', '_length'

    def __init__(self, lines: Iterable[str]):
        self._lines = [line.strip() for line in lines if line.strip()]
        self._n = 0
        self._length = len(self._lines)

    def __iter__(self):
        return self

    def __next__(self) -> str:
        if self._n >= self._length:
            raise StopIteration

        idx = self._n
        if _DATA_LINE_PATTERN.match(self._lines[idx]):
            inc = 2
        else:
            inc = 3

        rtn = '\n'.join(self._lines[idx:idx + inc])
        self._n += inc

        return rtn


def parseTleText(text: str, strict: bool = True) -> list[TwoLineElement]:
    """Parses every element set in a block of catalog text. If strict is False, element sets that fail to parse are
    logged and skipped, otherwise the first failure is raised."""

    rtn = []
    for group in TLEGroupIterator(text.splitlines()):
        try:
            rtn.append(TwoLineElement(group))
        except TLEException as e:
            if strict:
                raise
            logger.warning('skipping invalid element set (%s): %r', e, group.splitlines()[0])

    return rtn


def formatTle(catalogNumber: int, epochYear: int, epochDay: float, inclination: float, raan: float,
              eccentricity: float, argumentOfPerigee: float, meanAnomaly: float, meanMotion: float, *,
              bstar: float = 0.0, meanMotionDot: float = 0.0, meanMotionDDot: float = 0.0, name: str = None,
              classification: str = 'U', designator: str = '', setNumber: int = 999,
              revolutionNumber: int = 0) -> str:
    """Writes an element set with valid checksums from numeric values. Angles are in degrees, mean motion in
    revolutions per day and epochYear is the four digit year. A name line is included if name is given."""

    catalog = _formatCatalogNumber(catalogNumber)
    ecc = round(eccentricity * 1e7)
    if not 0 <= ecc < 10000000:
        raise ValueError(f'eccentricity must be in [0, 1), not {eccentricity}')

    line1 = f'1 {catalog}{classification} {designator:<8.8} {epochYear % 100:02d}{epochDay:012.8f} ' \
            f'{_formatMeanMotionDot(meanMotionDot)} {formatPackedExponent(meanMotionDDot)} ' \
            f'{formatPackedExponent(bstar)} 0 {setNumber % 10000:>4}'
    line2 = f'2 {catalog} {inclination:8.4f} {raan:8.4f} {ecc:07d} {argumentOfPerigee:8.4f} ' \
            f'{meanAnomaly:8.4f} {meanMotion:11.8f}{revolutionNumber % 100000:5d}'

    line1 += str(computeChecksum(line1))
    line2 += str(computeChecksum(line2))

    if name is None:
        return f'{line1}\n{line2}'
    return f'{name}\n{line1}\n{line2}'
