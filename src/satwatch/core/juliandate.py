import json
import datetime

from satwatch.util.constants import SECONDS_PER_DAY, J2000_JD


def _jdToGregorian(number: int, fraction: float) -> (int, int, int, int, int, float):
    """Convert a Julian date to Gregorian calendar components."""

    extraDay, F = divmod(fraction + 0.5, 1.0)
    # Meeus, Astronomical Algorithms, chapter 7
    Z = int(number + extraDay)
    if Z < 2299161:
        A = Z
    else:
        B = int((Z - 1867216.25) / 36524.25)
        A = Z + 1 + B - int(B / 4)
    C = A + 1524
    D = int((C - 122.1) / 365.25)
    G = int(365.25 * D)
    I = int((C - G) / 30.6001)
    # do not add the fractional part to the day
    d = C - G - int(30.6001 * I)
    m = I - 1 if I < 14 else I - 13
    y = D - 4716 if m > 2 else D - 4715

    # convert day fraction (measured from 0 hour) to time components
    s = F * SECONDS_PER_DAY
    h = int(s / 3600.0)
    s -= h * 3600.0
    mi = int(s / 60.0)
    s -= mi * 60.0

    return y, m, d, h, mi, s


def _dateToJd(year: int, month: int, day: int, hour: int, minute: int, second: float) -> (int, float):
    """Compute the Julian day number and fraction from Gregorian date components."""

    if month == 1 or month == 2:
        year = year - 1
        month = month + 12

    # The integer day number and the float fraction are kept apart to maintain precision, so the 0.5 is moved
    # 'up' to the fractional part.
    D = day + (hour / 24.0) + (minute / 1440.0) + (second / SECONDS_PER_DAY) - 0.5
    dayInt, dayFrac = divmod(D, 1.0)

    dayNumber = int(365.25 * (year + 4716)) + int(30.6001 * (month + 1)) + dayInt - 1524

    if dayNumber > 2299160:
        A = int(year / 100)
        B = 2 - A + int(A / 4)
        dayNumber += B

    return int(dayNumber), dayFrac


class JulianDate:
    """Julian Date object which represents a UTC moment in time as an integer day number and a fraction of the day
    after 12 noon. An object can be set with Gregorian calendar components via the class constructor, with a known
    day number via fromNumber(), or with an element set epoch via fromEpoch()."""

    __slots__ = '_dayNumber', '_dayFraction'

    def __init__(self, year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: float = 0.0):
        self._dayNumber, self._dayFraction = _dateToJd(year, month, day, hour, minute, second)

    @classmethod
    def fromNumber(cls, number: float, fraction: float = 0.0) -> 'JulianDate':
        """Creates a new JulianDate directly from a Julian day number, with an optional extra day fraction."""

        rtn = object.__new__(cls)
        whole, part = divmod(number, 1.0)
        extra, part = divmod(part + fraction, 1.0)
        rtn._dayNumber = int(whole + extra)
        rtn._dayFraction = part

        return rtn

    @classmethod
    def fromEpoch(cls, year: int, dayOfYear: float) -> 'JulianDate':
        """Creates a JulianDate from a four digit year and a fractional day of the year, where 1.0 is
        January 1 at 0h."""

        # Julian date of January 0.0 of the year
        number, fraction = _dateToJd(year, 1, 1, 0, 0, 0.0)
        return cls.fromNumber(number - 1, fraction + dayOfYear)

    @classmethod
    def fromDatetime(cls, date: datetime.datetime) -> 'JulianDate':
        """Creates a new JulianDate from a datetime.datetime instance. Aware datetimes are converted to UTC, naive
        datetimes are assumed to already be UTC."""

        if date.tzinfo is not None:
            date = date.astimezone(datetime.timezone.utc)

        seconds = date.second + date.microsecond / 1e6
        return JulianDate(date.year, date.month, date.day, date.hour, date.minute, seconds)

    def __str__(self) -> str:
        return str(round(self.value, 6)) + ' --- ' + self.date()

    def __repr__(self) -> str:
        y, m, d, h, mi, s = _jdToGregorian(self._dayNumber, self._dayFraction)
        return f'JulianDate({y}, {m}, {d}, {h}, {mi}, {s})'

    def toDict(self) -> dict:
        return {"dayNumber": self._dayNumber, "dayFraction": self._dayFraction}

    def toJson(self) -> str:
        return json.dumps(self, default=lambda o: o.toDict())

    # operators
    def __add__(self, other: datetime.timedelta) -> 'JulianDate':
        if isinstance(other, datetime.timedelta):
            return self.future(other / datetime.timedelta(days=1))
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other: 'JulianDate') -> float:
        """Difference between two dates in solar days."""

        if isinstance(other, JulianDate):
            return (self._dayNumber - other._dayNumber) + (self._dayFraction - other._dayFraction)
        return NotImplemented

    def _key(self) -> (int, float):
        return self._dayNumber, self._dayFraction

    def __eq__(self, other: 'JulianDate') -> bool:
        if isinstance(other, JulianDate):
            return self._key() == other._key()
        return NotImplemented

    def __lt__(self, other: 'JulianDate') -> bool:
        if isinstance(other, JulianDate):
            return self._key() < other._key()
        return NotImplemented

    def __le__(self, other: 'JulianDate') -> bool:
        if isinstance(other, JulianDate):
            return self._key() <= other._key()
        return NotImplemented

    def __gt__(self, other: 'JulianDate') -> bool:
        if isinstance(other, JulianDate):
            return self._key() > other._key()
        return NotImplemented

    def __ge__(self, other: 'JulianDate') -> bool:
        if isinstance(other, JulianDate):
            return self._key() >= other._key()
        return NotImplemented

    def __hash__(self):
        return hash(self._key())

    def __reduce__(self):
        return self.__class__.fromNumber, (self._dayNumber, self._dayFraction)

    # read-only properties
    @property
    def value(self) -> float:
        return self._dayNumber + self._dayFraction

    @property
    def number(self) -> int:
        return self._dayNumber

    @property
    def fraction(self) -> float:
        return self._dayFraction

    def future(self, days: int | float) -> 'JulianDate':
        """Create a new JulianDate in the future or past relative to this instance in solar days. A positive value
        moves forward in time, negative is backward."""

        return JulianDate.fromNumber(self._dayNumber, self._dayFraction + days)

    def futureSeconds(self, seconds: float) -> 'JulianDate':
        return self.future(seconds / SECONDS_PER_DAY)

    def date(self, n: int = 3) -> str:
        """Returns the date as a string formatted as yyyy/mm/dd hh:mm:ss UTC."""

        y, m, d, h, mi, s = _jdToGregorian(self._dayNumber, self._dayFraction)
        secondRound = round(s, n)
        # It's possible for the seconds place to round to 60, so we need to bump everything.
        if secondRound >= 60:
            y, m, d, h, mi, _ = _jdToGregorian(self._dayNumber, self._dayFraction + (1 / SECONDS_PER_DAY))
            secondRound = 0.0
        secondString = f'{secondRound:0{3 + n if n else 2}.{n}f}'

        return f'{y}/{m:02d}/{d:02d} {h:02d}:{mi:02d}:{secondString} UTC'

    def day(self) -> str:
        """Return the day portion of the date formatted as yyyy/mm/dd."""

        return self.date().split(' ')[0]

    def time(self, n: int = 3) -> str:
        """Return the time portion of the date formatted as hh:mm:ss."""

        return self.date(n).split(' ')[1]

    def toDatetime(self) -> datetime.datetime:
        """Converts the JulianDate to an aware datetime.datetime in UTC."""

        year, month, day, hour, minutes, secondsFloat = _jdToGregorian(self._dayNumber, self._dayFraction)

        secondsWhole, microSeconds = divmod(secondsFloat, 1.0)
        microSeconds = min(int(round(microSeconds * 1000000)), 999999)

        return datetime.datetime(year, month, day, hour, minutes, int(secondsWhole), microSeconds,
                                 datetime.timezone.utc)


def now() -> JulianDate:
    """Returns a JulianDate of the current UTC time."""

    return JulianDate.fromDatetime(datetime.datetime.now(datetime.timezone.utc))


J2000 = JulianDate.fromNumber(J2000_JD)
