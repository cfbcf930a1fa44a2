import logging
from dataclasses import dataclass
from math import sin, cos, sqrt, atan2, fmod, pi, radians, isfinite

from pyevspace import Vector

from satwatch import config
from satwatch.core.sidereal import greenwichSiderealAngle
from satwatch.orbit.exceptions import InitError, DecayedOrbit, InvalidDomain
from satwatch.orbit.sdp4 import DeepSpaceConstants, initializeDeepSpace, applySecular, applyPeriodics
from satwatch.orbit.state import StateVector
from satwatch.util.constants import TWOPI, MINUTES_PER_DAY, SGP4_EPOCH_ORIGIN_JD, DEEP_SPACE_PERIOD, WGS72_RADIUS, \
    WGS72_XKE, WGS72_J2, WGS72_J4, WGS72_J3OJ2

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from satwatch.core.juliandate import JulianDate
    from satwatch.orbit.tle import TwoLineElement

logger = logging.getLogger(__name__)

X2O3 = 2.0 / 3.0
# minutes per revolution / radians
XPDOTP = MINUTES_PER_DAY / TWOPI
# drag density function parameters, in earth radii
SS = 78.0 / WGS72_RADIUS + 1.0
QZMS2T = ((120.0 - 78.0) / WGS72_RADIUS) ** 4
# guard for the divide by zero at 180 degree inclination
TEMP4 = 1.5e-12
VKMPERSEC = WGS72_RADIUS * WGS72_XKE / 60.0


@dataclass(frozen=True)
class MeanElements:
    """Mean elements of an element set in the units of the propagator: radians and radians per minute."""

    epoch: float        # days since 1949 December 31 00:00 UT
    bstar: float
    ecco: float
    argpo: float
    inclo: float
    mo: float
    noKozai: float
    nodeo: float

    @classmethod
    def fromTle(cls, tle: 'TwoLineElement') -> 'MeanElements':
        epoch = (tle.epoch.number - int(SGP4_EPOCH_ORIGIN_JD)) + (tle.epoch.fraction - 0.5)
        return cls(epoch=epoch, bstar=tle.bstar, ecco=tle.eccentricity, argpo=radians(tle.argumentOfPerigee),
                   inclo=radians(tle.inclination), mo=radians(tle.meanAnomaly), noKozai=tle.meanMotion / XPDOTP,
                   nodeo=radians(tle.raan))


@dataclass(frozen=True)
class NearEarthConstants:
    """Secular and periodic constants shared by the near earth and deep space branches."""

    noUnkozai: float
    ao: float
    con41: float
    cosio: float
    sinio: float
    x1mth2: float
    x7thm1: float
    eta: float
    cc1: float
    cc4: float
    cc5: float
    mdot: float
    argpdot: float
    nodedot: float
    nodecf: float
    omgcof: float
    xmcof: float
    t2cof: float
    xlcof: float
    aycof: float
    delmo: float
    sinmao: float
    gsto: float
    # isimp is set for perigees below 220 km, where the higher order drag terms are dropped
    isimp: bool
    d2: float = 0.0
    d3: float = 0.0
    d4: float = 0.0
    t3cof: float = 0.0
    t4cof: float = 0.0
    t5cof: float = 0.0


def _initialize(elements: MeanElements) -> (NearEarthConstants, DeepSpaceConstants | None):
    ecco = elements.ecco
    inclo = elements.inclo
    noKozai = elements.noKozai
    bstar = elements.bstar

    if not isfinite(noKozai) or noKozai <= 0.0:
        raise InitError(f'mean motion must be positive, not {noKozai}')
    if not 0.0 <= ecco < 1.0:
        raise InitError(f'eccentricity must be in [0, 1), not {ecco}')

    # recover the original mean motion and semi-major axis from the Kozai mean motion
    eccsq = ecco * ecco
    omeosq = 1.0 - eccsq
    rteosq = sqrt(omeosq)
    cosio = cos(inclo)
    cosio2 = cosio * cosio

    ak = pow(WGS72_XKE / noKozai, X2O3)
    d1 = 0.75 * WGS72_J2 * (3.0 * cosio2 - 1.0) / (rteosq * omeosq)
    delta = d1 / (ak * ak)
    adel = ak * (1.0 - delta * delta - delta * (1.0 / 3.0 + 134.0 * delta * delta / 81.0))
    delta = d1 / (adel * adel)
    noUnkozai = noKozai / (1.0 + delta)
    if not isfinite(noUnkozai) or noUnkozai <= 0.0:
        raise InitError(f'recovered mean motion is invalid: {noUnkozai}')

    ao = pow(WGS72_XKE / noUnkozai, X2O3)
    sinio = sin(inclo)
    po = ao * omeosq
    con42 = 1.0 - 5.0 * cosio2
    con41 = -con42 - cosio2 - cosio2
    posq = po * po
    rp = ao * (1.0 - ecco)
    gsto = greenwichSiderealAngle(elements.epoch + SGP4_EPOCH_ORIGIN_JD)

    isimp = rp < (220.0 / WGS72_RADIUS + 1.0)
    sfour = SS
    qzms24 = QZMS2T
    perige = (rp - 1.0) * WGS72_RADIUS

    # adjust the drag density parameters for perigees below 156 km
    if perige < 156.0:
        sfour = perige - 78.0
        if perige < 98.0:
            sfour = 20.0
        qzms24 = ((120.0 - sfour) / WGS72_RADIUS) ** 4.0
        sfour = sfour / WGS72_RADIUS + 1.0

    if ao <= sfour:
        raise InitError(f'semi-major axis {ao} is inside the drag density reference radius {sfour}')

    pinvsq = 1.0 / posq
    tsi = 1.0 / (ao - sfour)
    eta = ao * ecco * tsi
    etasq = eta * eta
    eeta = ecco * eta
    psisq = abs(1.0 - etasq)
    coef = qzms24 * pow(tsi, 4.0)
    coef1 = coef / pow(psisq, 3.5)
    cc2 = coef1 * noUnkozai * (ao * (1.0 + 1.5 * etasq + eeta * (4.0 + etasq))
                               + 0.375 * WGS72_J2 * tsi / psisq * con41 * (8.0 + 3.0 * etasq * (8.0 + etasq)))
    cc1 = bstar * cc2
    cc3 = 0.0
    if ecco > 1.0e-4:
        cc3 = -2.0 * coef * tsi * WGS72_J3OJ2 * noUnkozai * sinio / ecco
    x1mth2 = 1.0 - cosio2
    cc4 = 2.0 * noUnkozai * coef1 * ao * omeosq * (
        eta * (2.0 + 0.5 * etasq) + ecco * (0.5 + 2.0 * etasq)
        - WGS72_J2 * tsi / (ao * psisq) * (-3.0 * con41 * (1.0 - 2.0 * eeta + etasq * (1.5 - 0.5 * eeta))
                                            + 0.75 * x1mth2 * (2.0 * etasq - eeta * (1.0 + etasq))
                                            * cos(2.0 * elements.argpo)))
    cc5 = 2.0 * coef1 * ao * omeosq * (1.0 + 2.75 * (etasq + eeta) + eeta * etasq)

    # secular rates from J2 and J4
    cosio4 = cosio2 * cosio2
    temp1 = 1.5 * WGS72_J2 * pinvsq * noUnkozai
    temp2 = 0.5 * temp1 * WGS72_J2 * pinvsq
    temp3 = -0.46875 * WGS72_J4 * pinvsq * pinvsq * noUnkozai
    mdot = noUnkozai + 0.5 * temp1 * rteosq * con41 \
        + 0.0625 * temp2 * rteosq * (13.0 - 78.0 * cosio2 + 137.0 * cosio4)
    argpdot = -0.5 * temp1 * con42 + 0.0625 * temp2 * (7.0 - 114.0 * cosio2 + 395.0 * cosio4) \
        + temp3 * (3.0 - 36.0 * cosio2 + 49.0 * cosio4)
    xhdot1 = -temp1 * cosio
    nodedot = xhdot1 + (0.5 * temp2 * (4.0 - 19.0 * cosio2) + 2.0 * temp3 * (3.0 - 7.0 * cosio2)) * cosio

    omgcof = bstar * cc3 * cos(elements.argpo)
    xmcof = 0.0
    if ecco > 1.0e-4:
        xmcof = -X2O3 * coef * bstar / eeta
    nodecf = 3.5 * omeosq * xhdot1 * cc1
    t2cof = 1.5 * cc1
    if abs(cosio + 1.0) > 1.5e-12:
        xlcof = -0.25 * WGS72_J3OJ2 * sinio * (3.0 + 5.0 * cosio) / (1.0 + cosio)
    else:
        xlcof = -0.25 * WGS72_J3OJ2 * sinio * (3.0 + 5.0 * cosio) / TEMP4
    aycof = -0.5 * WGS72_J3OJ2 * sinio
    delmotemp = 1.0 + eta * cos(elements.mo)
    delmo = delmotemp * delmotemp * delmotemp

    deepSpace = None
    if TWOPI / noUnkozai >= DEEP_SPACE_PERIOD:
        isimp = True
        deepSpace = initializeDeepSpace(elements.epoch, ecco, elements.argpo, inclo, elements.nodeo, elements.mo,
                                        noUnkozai, mdot, argpdot, nodedot, gsto, WGS72_XKE)

    higherOrder = {}
    if not isimp:
        cc1sq = cc1 * cc1
        d2 = 4.0 * ao * tsi * cc1sq
        temp = d2 * tsi * cc1 / 3.0
        d3 = (17.0 * ao + sfour) * temp
        d4 = 0.5 * temp * ao * tsi * (221.0 * ao + 31.0 * sfour) * cc1
        higherOrder = {
            'd2': d2,
            'd3': d3,
            'd4': d4,
            't3cof': d2 + 2.0 * cc1sq,
            't4cof': 0.25 * (3.0 * d3 + cc1 * (12.0 * d2 + 10.0 * cc1sq)),
            't5cof': 0.2 * (3.0 * d4 + 12.0 * cc1 * d3 + 6.0 * d2 * d2 + 15.0 * cc1sq * (2.0 * d2 + cc1sq)),
        }

    nearEarth = NearEarthConstants(noUnkozai=noUnkozai, ao=ao, con41=con41, cosio=cosio, sinio=sinio,
                                   x1mth2=x1mth2, x7thm1=7.0 * cosio2 - 1.0, eta=eta, cc1=cc1, cc4=cc4, cc5=cc5,
                                   mdot=mdot, argpdot=argpdot, nodedot=nodedot, nodecf=nodecf, omgcof=omgcof,
                                   xmcof=xmcof, t2cof=t2cof, xlcof=xlcof, aycof=aycof, delmo=delmo,
                                   sinmao=sin(elements.mo), gsto=gsto, isimp=isimp, **higherOrder)

    return nearEarth, deepSpace


def solveKepler(u: float, axnl: float, aynl: float) -> (float, float):
    """Solves Kepler's equation for the eccentric longitude with Newton-Raphson iteration, returning its sine and
    cosine. The correction of each step is limited to 0.95 radians. The iteration stops after
    config.KEPLER_MAX_ITERATIONS steps and the last iterate is used if the tolerance was not reached."""

    eo1 = u
    tem5 = 0.0
    sineo1 = sin(eo1)
    coseo1 = cos(eo1)
    for _ in range(config.KEPLER_MAX_ITERATIONS):
        sineo1 = sin(eo1)
        coseo1 = cos(eo1)
        tem5 = 1.0 - coseo1 * axnl - sineo1 * aynl
        tem5 = (u - aynl * coseo1 + axnl * sineo1 - eo1) / tem5
        if abs(tem5) >= 0.95:
            tem5 = 0.95 if tem5 > 0.0 else -0.95
        eo1 = eo1 + tem5
        if abs(tem5) < config.KEPLER_TOLERANCE:
            break
    else:
        logger.warning("Kepler's equation did not converge in %d iterations, last correction %e",
                       config.KEPLER_MAX_ITERATIONS, tem5)

    # the returned terms are those of the last evaluated iterate
    return sineo1, coseo1


class Propagator:
    """SGP4/SDP4 propagator of a single element set. All constants are computed when the propagator is created and
    never change afterwards, so one propagator can be used from several threads at once.

    Initialization raises InitError for degenerate mean elements. Propagation raises DecayedOrbit or InvalidDomain
    (both PropagationError) when the elements are no longer physically valid at the requested time, which does not
    affect propagation to other times."""

    __slots__ = '_tle', '_elements', '_nearEarth', '_deepSpace'

    def __init__(self, tle: 'TwoLineElement'):
        self._tle = tle
        self._elements = MeanElements.fromTle(tle)
        self._nearEarth, self._deepSpace = _initialize(self._elements)

        logger.debug('initialized %s propagator for %s (%d), period %.2f min',
                     'deep space' if self._deepSpace is not None else 'near earth', tle.name, tle.catalogNumber,
                     TWOPI / self._nearEarth.noUnkozai)

    def __repr__(self) -> str:
        return f'Propagator({self._tle.name!r}, {self._tle.catalogNumber}, method={self.method!r})'

    @property
    def tle(self) -> 'TwoLineElement':
        return self._tle

    @property
    def epoch(self) -> 'JulianDate':
        return self._tle.epoch

    @property
    def elements(self) -> MeanElements:
        return self._elements

    @property
    def constants(self) -> NearEarthConstants:
        return self._nearEarth

    @property
    def deepSpace(self) -> DeepSpaceConstants | None:
        return self._deepSpace

    @property
    def isDeepSpace(self) -> bool:
        return self._deepSpace is not None

    @property
    def method(self) -> str:
        """'d' for the deep space branch and 'n' for the near earth branch."""
        return 'd' if self._deepSpace is not None else 'n'

    def minutesSinceEpoch(self, time: 'JulianDate') -> float:
        return (time - self._tle.epoch) * MINUTES_PER_DAY

    def propagate(self, time: 'JulianDate') -> StateVector:
        """Computes the TEME state vector at time."""

        position, velocity = self.propagateMinutes(self.minutesSinceEpoch(time))
        return StateVector(position, velocity, time)

    def propagateMinutes(self, tsince: float) -> (Vector, Vector):
        """Computes TEME position (km) and velocity (km/s) tsince minutes from epoch, negative before epoch."""

        el = self._elements
        ne = self._nearEarth
        ds = self._deepSpace

        # secular gravity and atmospheric drag
        xmdf = el.mo + ne.mdot * tsince
        argpdf = el.argpo + ne.argpdot * tsince
        nodedf = el.nodeo + ne.nodedot * tsince
        argpm = argpdf
        mm = xmdf
        t2 = tsince * tsince
        nodem = nodedf + ne.nodecf * t2
        tempa = 1.0 - ne.cc1 * tsince
        tempe = el.bstar * ne.cc4 * tsince
        templ = ne.t2cof * t2

        if not ne.isimp:
            delomg = ne.omgcof * tsince
            delmtemp = 1.0 + ne.eta * cos(xmdf)
            delm = ne.xmcof * (delmtemp * delmtemp * delmtemp - ne.delmo)
            temp = delomg + delm
            mm = xmdf + temp
            argpm = argpdf - temp
            t3 = t2 * tsince
            t4 = t3 * tsince
            tempa = tempa - ne.d2 * t2 - ne.d3 * t3 - ne.d4 * t4
            tempe = tempe + el.bstar * ne.cc5 * (sin(mm) - ne.sinmao)
            templ = templ + ne.t3cof * t3 + t4 * (ne.t4cof + tsince * ne.t5cof)

        nm = ne.noUnkozai
        em = el.ecco
        inclm = el.inclo
        if ds is not None:
            em, argpm, inclm, mm, nodem, nm = applySecular(ds, tsince, ne.gsto, ne.noUnkozai, el.argpo, ne.argpdot,
                                                           em, argpm, inclm, mm, nodem)

        if nm <= 0.0:
            raise InvalidDomain(f'mean motion {nm} is not positive at {tsince} minutes', tsince)
        # drag has taken the semi-major axis to zero
        if tempa <= 0.0:
            raise DecayedOrbit(f'orbit decayed before {tsince} minutes', tsince)

        am = pow(WGS72_XKE / nm, X2O3) * tempa * tempa
        nm = WGS72_XKE / pow(am, 1.5)
        em = em - tempe

        if em >= 1.0 or em < -0.001:
            raise InvalidDomain(f'mean eccentricity {em} is outside [-0.001, 1) at {tsince} minutes', tsince)
        if em < 1.0e-6:
            em = 1.0e-6
        if am * (1.0 - em) < 1.0:
            raise DecayedOrbit(f'mean perigee radius {am * (1.0 - em) * WGS72_RADIUS:.3f} km is below the earth '
                               f'radius at {tsince} minutes', tsince)

        mm = mm + ne.noUnkozai * templ
        xlm = mm + argpm + nodem

        nodem = fmod(nodem, TWOPI)
        argpm = fmod(argpm, TWOPI)
        xlm = fmod(xlm, TWOPI)
        mm = fmod(xlm - argpm - nodem, TWOPI)

        # lunar-solar periodics
        ep = em
        xincp = inclm
        argpp = argpm
        nodep = nodem
        mp = mm
        sinip = ne.sinio
        cosip = ne.cosio
        aycof = ne.aycof
        xlcof = ne.xlcof
        con41 = ne.con41
        x1mth2 = ne.x1mth2
        x7thm1 = ne.x7thm1

        if ds is not None:
            ep, xincp, nodep, argpp, mp = applyPeriodics(ds, tsince, ep, xincp, nodep, argpp, mp)
            if xincp < 0.0:
                xincp = -xincp
                nodep = nodep + pi
                argpp = argpp - pi
            if ep < 0.0 or ep > 1.0:
                raise InvalidDomain(f'perturbed eccentricity {ep} is outside [0, 1] at {tsince} minutes', tsince)

            sinip = sin(xincp)
            cosip = cos(xincp)
            aycof = -0.5 * WGS72_J3OJ2 * sinip
            if abs(cosip + 1.0) > 1.5e-12:
                xlcof = -0.25 * WGS72_J3OJ2 * sinip * (3.0 + 5.0 * cosip) / (1.0 + cosip)
            else:
                xlcof = -0.25 * WGS72_J3OJ2 * sinip * (3.0 + 5.0 * cosip) / TEMP4

        # long period periodics
        axnl = ep * cos(argpp)
        temp = 1.0 / (am * (1.0 - ep * ep))
        aynl = ep * sin(argpp) + temp * aycof
        xl = mp + argpp + nodep + temp * xlcof * axnl

        u = fmod(xl - nodep, TWOPI)
        sineo1, coseo1 = solveKepler(u, axnl, aynl)

        # short period preliminary quantities
        ecose = axnl * coseo1 + aynl * sineo1
        esine = axnl * sineo1 - aynl * coseo1
        el2 = axnl * axnl + aynl * aynl
        pl = am * (1.0 - el2)
        if pl < 0.0:
            raise InvalidDomain(f'semi-latus rectum {pl} is negative at {tsince} minutes', tsince)

        rl = am * (1.0 - ecose)
        rdotl = sqrt(am) * esine / rl
        rvdotl = sqrt(pl) / rl
        betal = sqrt(1.0 - el2)
        temp = esine / (1.0 + betal)
        sinu = am / rl * (sineo1 - aynl - axnl * temp)
        cosu = am / rl * (coseo1 - axnl + aynl * temp)
        su = atan2(sinu, cosu)
        sin2u = (cosu + cosu) * sinu
        cos2u = 1.0 - 2.0 * sinu * sinu
        temp = 1.0 / pl
        temp1 = 0.5 * WGS72_J2 * temp
        temp2 = temp1 * temp

        if ds is not None:
            cosisq = cosip * cosip
            con41 = 3.0 * cosisq - 1.0
            x1mth2 = 1.0 - cosisq
            x7thm1 = 7.0 * cosisq - 1.0

        # short period periodics
        mrt = rl * (1.0 - 1.5 * temp2 * betal * con41) + 0.5 * temp1 * x1mth2 * cos2u
        su = su - 0.25 * temp2 * x7thm1 * sin2u
        xnode = nodep + 1.5 * temp2 * cosip * sin2u
        xinc = xincp + 1.5 * temp2 * cosip * sinip * cos2u
        mvt = rdotl - nm * temp1 * x1mth2 * sin2u / WGS72_XKE
        rvdot = rvdotl + nm * temp1 * (x1mth2 * cos2u + 1.5 * con41) / WGS72_XKE

        if mrt < 1.0:
            raise DecayedOrbit(f'orbit radius {mrt * WGS72_RADIUS:.3f} km is below the earth radius at {tsince} '
                               f'minutes', tsince)

        # orientation vectors
        sinsu = sin(su)
        cossu = cos(su)
        snod = sin(xnode)
        cnod = cos(xnode)
        sini = sin(xinc)
        cosi = cos(xinc)
        xmx = -snod * cosi
        xmy = cnod * cosi
        ux = xmx * sinsu + cnod * cossu
        uy = xmy * sinsu + snod * cossu
        uz = sini * sinsu
        vx = xmx * cossu - cnod * sinsu
        vy = xmy * cossu - snod * sinsu
        vz = sini * cossu

        # position and velocity in km and km/s
        mr = mrt * WGS72_RADIUS
        position = Vector(mr * ux, mr * uy, mr * uz)
        velocity = Vector((mvt * ux + rvdot * vx) * VKMPERSEC,
                          (mvt * uy + rvdot * vy) * VKMPERSEC,
                          (mvt * uz + rvdot * vz) * VKMPERSEC)

        return position, velocity


def initialize(tle: 'TwoLineElement') -> Propagator:
    """Creates a propagator from an element set, raising InitError for degenerate elements."""

    return Propagator(tle)


def propagate(propagator: Propagator, time: 'JulianDate') -> StateVector:
    """Computes the state vector of a propagator at time, raising a PropagationError if the orbit is not physically
    valid at that time."""

    return propagator.propagate(time)
