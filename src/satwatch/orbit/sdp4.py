"""Deep space (SDP4) extensions to the SGP4 model.

Orbits with a period of 225 minutes or more are perturbed by lunar-solar gravity and, near the 12 hour and 24 hour
periods, by resonance with the earth's tesseral harmonics. The functions here compute those constants once when a
propagator is initialized and apply the secular, resonance and long period terms during propagation."""

from dataclasses import dataclass
from math import sin, cos, sqrt, atan2, fmod, pi

from satwatch.util.constants import TWOPI

# lunar-solar
ZNS = 1.19459e-5
ZES = 0.01675
ZNL = 1.5835218e-4
ZEL = 0.05490
C1SS = 2.9864797e-6
C1L = 4.7968065e-7
ZSINIS = 0.39785416
ZCOSIS = 0.91744867
ZCOSGS = 0.1945905
ZSINGS = -0.98088458

# resonance
Q22 = 1.7891679e-6
Q31 = 2.1460748e-6
Q33 = 2.2123015e-7
ROOT22 = 1.7891679e-6
ROOT32 = 3.7393792e-7
ROOT44 = 7.3636953e-9
ROOT52 = 1.1428639e-7
ROOT54 = 2.1765803e-9
RPTIM = 4.37526908801129966e-3
FASX2 = 0.13130908
FASX4 = 2.8843198
FASX6 = 0.37448087
G22 = 5.7686396
G32 = 0.95240898
G44 = 1.8014998
G52 = 1.0508330
G54 = 4.4108898

# integrator step in minutes
STEP = 720.0
STEP2 = 259200.0

NO_RESONANCE = 0
SYNCHRONOUS = 1
HALF_DAY = 2


@dataclass(frozen=True)
class DeepSpaceConstants:
    """Constants of the deep space branch. The fields keep the names of the published algorithm."""

    # long period lunar-solar periodics
    e3: float
    ee2: float
    se2: float
    se3: float
    sgh2: float
    sgh3: float
    sgh4: float
    sh2: float
    sh3: float
    si2: float
    si3: float
    sl2: float
    sl3: float
    sl4: float
    xgh2: float
    xgh3: float
    xgh4: float
    xh2: float
    xh3: float
    xi2: float
    xi3: float
    xl2: float
    xl3: float
    xl4: float
    zmol: float
    zmos: float

    # secular rates
    dedt: float
    didt: float
    dmdt: float
    dnodt: float
    domdt: float

    # resonance
    irez: int
    d2201: float = 0.0
    d2211: float = 0.0
    d3210: float = 0.0
    d3222: float = 0.0
    d4410: float = 0.0
    d4422: float = 0.0
    d5220: float = 0.0
    d5232: float = 0.0
    d5421: float = 0.0
    d5433: float = 0.0
    del1: float = 0.0
    del2: float = 0.0
    del3: float = 0.0
    xfact: float = 0.0
    xlamo: float = 0.0


def _solarLunarGeometry(epoch: float, ecco: float, argpo: float, inclo: float, nodeo: float, noUnkozai: float):
    """Computes the lunar and solar coefficients shared by the periodic and secular terms."""

    snodm = sin(nodeo)
    cnodm = cos(nodeo)
    sinomm = sin(argpo)
    cosomm = cos(argpo)
    sinim = sin(inclo)
    cosim = cos(inclo)
    emsq = ecco * ecco
    betasq = 1.0 - emsq
    rtemsq = sqrt(betasq)

    day = epoch + 18261.5
    xnodce = fmod(4.5236020 - 9.2422029e-4 * day, TWOPI)
    stem = sin(xnodce)
    ctem = cos(xnodce)
    zcosil = 0.91375164 - 0.03568096 * ctem
    zsinil = sqrt(1.0 - zcosil * zcosil)
    zsinhl = 0.089683511 * stem / zsinil
    zcoshl = sqrt(1.0 - zsinhl * zsinhl)
    gam = 5.8351514 + 0.0019443680 * day
    zx = 0.39785416 * stem / zsinil
    zy = zcoshl * ctem + 0.91744867 * zsinhl * stem
    zx = atan2(zx, zy)
    zx = gam + zx - xnodce
    zcosgl = cos(zx)
    zsingl = sin(zx)

    # solar terms first, then lunar
    zcosg, zsing, zcosi, zsini = ZCOSGS, ZSINGS, ZCOSIS, ZSINIS
    zcosh = cnodm
    zsinh = snodm
    cc = C1SS
    xnoi = 1.0 / noUnkozai

    terms = []
    for body in ('sun', 'moon'):
        a1 = zcosg * zcosh + zsing * zcosi * zsinh
        a3 = -zsing * zcosh + zcosg * zcosi * zsinh
        a7 = -zcosg * zsinh + zsing * zcosi * zcosh
        a8 = zsing * zsini
        a9 = zsing * zsinh + zcosg * zcosi * zcosh
        a10 = zcosg * zsini
        a2 = cosim * a7 + sinim * a8
        a4 = cosim * a9 + sinim * a10
        a5 = -sinim * a7 + cosim * a8
        a6 = -sinim * a9 + cosim * a10

        x1 = a1 * cosomm + a2 * sinomm
        x2 = a3 * cosomm + a4 * sinomm
        x3 = -a1 * sinomm + a2 * cosomm
        x4 = -a3 * sinomm + a4 * cosomm
        x5 = a5 * sinomm
        x6 = a6 * sinomm
        x7 = a5 * cosomm
        x8 = a6 * cosomm

        z31 = 12.0 * x1 * x1 - 3.0 * x3 * x3
        z32 = 24.0 * x1 * x2 - 6.0 * x3 * x4
        z33 = 12.0 * x2 * x2 - 3.0 * x4 * x4
        z1 = 3.0 * (a1 * a1 + a2 * a2) + z31 * emsq
        z2 = 6.0 * (a1 * a3 + a2 * a4) + z32 * emsq
        z3 = 3.0 * (a3 * a3 + a4 * a4) + z33 * emsq
        z11 = -6.0 * a1 * a5 + emsq * (-24.0 * x1 * x7 - 6.0 * x3 * x5)
        z12 = -6.0 * (a1 * a6 + a3 * a5) + emsq * (-24.0 * (x2 * x7 + x1 * x8) - 6.0 * (x3 * x6 + x4 * x5))
        z13 = -6.0 * a3 * a6 + emsq * (-24.0 * x2 * x8 - 6.0 * x4 * x6)
        z21 = 6.0 * a2 * a5 + emsq * (24.0 * x1 * x5 - 6.0 * x3 * x7)
        z22 = 6.0 * (a4 * a5 + a2 * a6) + emsq * (24.0 * (x2 * x5 + x1 * x6) - 6.0 * (x4 * x7 + x3 * x8))
        z23 = 6.0 * a4 * a6 + emsq * (24.0 * x2 * x6 - 6.0 * x4 * x8)
        z1 = z1 + z1 + betasq * z31
        z2 = z2 + z2 + betasq * z32
        z3 = z3 + z3 + betasq * z33
        s3 = cc * xnoi
        s2 = -0.5 * s3 / rtemsq
        s4 = s3 * rtemsq
        s1 = -15.0 * ecco * s4
        s5 = x1 * x3 + x2 * x4
        s6 = x2 * x3 + x1 * x4
        s7 = x2 * x4 - x1 * x3

        terms.append({'s1': s1, 's2': s2, 's3': s3, 's4': s4, 's5': s5, 's6': s6, 's7': s7,
                      'z1': z1, 'z2': z2, 'z3': z3, 'z11': z11, 'z12': z12, 'z13': z13,
                      'z21': z21, 'z22': z22, 'z23': z23, 'z31': z31, 'z32': z32, 'z33': z33})

        # switch to lunar geometry for the second pass
        zcosg, zsing, zcosi, zsini = zcosgl, zsingl, zcosil, zsinil
        zcosh = zcoshl * cnodm + zsinhl * snodm
        zsinh = snodm * zcoshl - cnodm * zsinhl
        cc = C1L

    zmol = fmod(4.7199672 + 0.22997150 * day - gam, TWOPI)
    zmos = fmod(6.2565837 + 0.017201977 * day, TWOPI)

    return terms[0], terms[1], zmol, zmos, sinim, cosim, emsq


def initializeDeepSpace(epoch: float, ecco: float, argpo: float, inclo: float, nodeo: float, mo: float,
                        noUnkozai: float, mdot: float, argpdot: float, nodedot: float, gsto: float,
                        xke: float) -> DeepSpaceConstants:
    """Computes the deep space constants. Epoch is in days since 1949 December 31 00:00 UT, angles are in radians
    and rates in radians per minute."""

    sun, moon, zmol, zmos, sinim, cosim, emsq = _solarLunarGeometry(epoch, ecco, argpo, inclo, nodeo, noUnkozai)
    ss = sun
    s = moon

    periodics = {
        'se2': 2.0 * ss['s1'] * ss['s6'],
        'se3': 2.0 * ss['s1'] * ss['s7'],
        'si2': 2.0 * ss['s2'] * ss['z12'],
        'si3': 2.0 * ss['s2'] * (ss['z13'] - ss['z11']),
        'sl2': -2.0 * ss['s3'] * ss['z2'],
        'sl3': -2.0 * ss['s3'] * (ss['z3'] - ss['z1']),
        'sl4': -2.0 * ss['s3'] * (-21.0 - 9.0 * emsq) * ZES,
        'sgh2': 2.0 * ss['s4'] * ss['z32'],
        'sgh3': 2.0 * ss['s4'] * (ss['z33'] - ss['z31']),
        'sgh4': -18.0 * ss['s4'] * ZES,
        'sh2': -2.0 * ss['s2'] * ss['z22'],
        'sh3': -2.0 * ss['s2'] * (ss['z23'] - ss['z21']),
        'ee2': 2.0 * s['s1'] * s['s6'],
        'e3': 2.0 * s['s1'] * s['s7'],
        'xi2': 2.0 * s['s2'] * s['z12'],
        'xi3': 2.0 * s['s2'] * (s['z13'] - s['z11']),
        'xl2': -2.0 * s['s3'] * s['z2'],
        'xl3': -2.0 * s['s3'] * (s['z3'] - s['z1']),
        'xl4': -2.0 * s['s3'] * (-21.0 - 9.0 * emsq) * ZEL,
        'xgh2': 2.0 * s['s4'] * s['z32'],
        'xgh3': 2.0 * s['s4'] * (s['z33'] - s['z31']),
        'xgh4': -18.0 * s['s4'] * ZEL,
        'xh2': -2.0 * s['s2'] * s['z22'],
        'xh3': -2.0 * s['s2'] * (s['z23'] - s['z21']),
        'zmol': zmol,
        'zmos': zmos,
    }

    # secular solar terms
    ses = ss['s1'] * ZNS * ss['s5']
    sis = ss['s2'] * ZNS * (ss['z11'] + ss['z13'])
    sls = -ZNS * ss['s3'] * (ss['z1'] + ss['z3'] - 14.0 - 6.0 * emsq)
    sghs = ss['s4'] * ZNS * (ss['z31'] + ss['z33'] - 6.0)
    shs = -ZNS * ss['s2'] * (ss['z21'] + ss['z23'])
    # node terms vanish for equatorial orbits, prograde or retrograde
    if inclo < 5.2359877e-2 or inclo > pi - 5.2359877e-2:
        shs = 0.0
    if sinim != 0.0:
        shs = shs / sinim
    sgs = sghs - cosim * shs

    # secular lunar terms
    dedt = ses + s['s1'] * ZNL * s['s5']
    didt = sis + s['s2'] * ZNL * (s['z11'] + s['z13'])
    dmdt = sls - ZNL * s['s3'] * (s['z1'] + s['z3'] - 14.0 - 6.0 * emsq)
    sghl = s['s4'] * ZNL * (s['z31'] + s['z33'] - 6.0)
    shll = -ZNL * s['s2'] * (s['z21'] + s['z23'])
    if inclo < 5.2359877e-2 or inclo > pi - 5.2359877e-2:
        shll = 0.0
    domdt = sgs + sghl
    dnodt = shs
    if sinim != 0.0:
        domdt = domdt - cosim / sinim * shll
        dnodt = dnodt + shll / sinim

    secular = {'dedt': dedt, 'didt': didt, 'dmdt': dmdt, 'dnodt': dnodt, 'domdt': domdt}

    irez = NO_RESONANCE
    if 0.0034906585 < noUnkozai < 0.0052359877:
        irez = SYNCHRONOUS
    if 8.26e-3 <= noUnkozai <= 9.24e-3 and ecco >= 0.5:
        irez = HALF_DAY

    resonance = {}
    if irez != NO_RESONANCE:
        theta = fmod(gsto, TWOPI)
        aonv = pow(noUnkozai / xke, 2.0 / 3.0)
        if irez == HALF_DAY:
            resonance = _halfDayResonance(ecco, emsq, sinim, cosim, noUnkozai, aonv)
            resonance['xlamo'] = fmod(mo + nodeo + nodeo - theta - theta, TWOPI)
            resonance['xfact'] = mdot + dmdt + 2.0 * (nodedot + dnodt - RPTIM) - noUnkozai
        else:
            resonance = _synchronousResonance(emsq, sinim, cosim, noUnkozai, aonv)
            resonance['xlamo'] = fmod(mo + nodeo + argpo - theta, TWOPI)
            resonance['xfact'] = mdot + argpdot + nodedot - RPTIM + dmdt + domdt + dnodt - noUnkozai

    return DeepSpaceConstants(irez=irez, **periodics, **secular, **resonance)


def _halfDayResonance(em: float, emsq: float, sinim: float, cosim: float, nm: float, aonv: float) -> dict:
    """Geopotential resonance coefficients of 12 hour orbits."""

    cosisq = cosim * cosim
    eoc = em * emsq
    g201 = -0.306 - (em - 0.64) * 0.440

    if em <= 0.65:
        g211 = 3.616 - 13.2470 * em + 16.2900 * emsq
        g310 = -19.302 + 117.3900 * em - 228.4190 * emsq + 156.5910 * eoc
        g322 = -18.9068 + 109.7927 * em - 214.6334 * emsq + 146.5816 * eoc
        g410 = -41.122 + 242.6940 * em - 471.0940 * emsq + 313.9530 * eoc
        g422 = -146.407 + 841.8800 * em - 1629.014 * emsq + 1083.4350 * eoc
        g520 = -532.114 + 3017.977 * em - 5740.032 * emsq + 3708.2760 * eoc
    else:
        g211 = -72.099 + 331.819 * em - 508.738 * emsq + 266.724 * eoc
        g310 = -346.844 + 1582.851 * em - 2415.925 * emsq + 1246.113 * eoc
        g322 = -342.585 + 1554.908 * em - 2366.899 * emsq + 1215.972 * eoc
        g410 = -1052.797 + 4758.686 * em - 7193.992 * emsq + 3651.957 * eoc
        g422 = -3581.690 + 16178.110 * em - 24462.770 * emsq + 12422.520 * eoc
        if em > 0.715:
            g520 = -5149.66 + 29936.92 * em - 54087.36 * emsq + 31324.56 * eoc
        else:
            g520 = 1464.74 - 4664.75 * em + 3763.64 * emsq

    if em < 0.7:
        g533 = -919.22770 + 4988.6100 * em - 9064.7700 * emsq + 5542.21 * eoc
        g521 = -822.71072 + 4568.6173 * em - 8491.4146 * emsq + 5337.524 * eoc
        g532 = -853.66600 + 4690.2500 * em - 8624.7700 * emsq + 5341.4 * eoc
    else:
        g533 = -37995.780 + 161616.52 * em - 229838.20 * emsq + 109377.94 * eoc
        g521 = -51752.104 + 218913.95 * em - 309468.16 * emsq + 146349.42 * eoc
        g532 = -40023.880 + 170470.89 * em - 242699.48 * emsq + 115605.82 * eoc

    sini2 = sinim * sinim
    f220 = 0.75 * (1.0 + 2.0 * cosim + cosisq)
    f221 = 1.5 * sini2
    f321 = 1.875 * sinim * (1.0 - 2.0 * cosim - 3.0 * cosisq)
    f322 = -1.875 * sinim * (1.0 + 2.0 * cosim - 3.0 * cosisq)
    f441 = 35.0 * sini2 * f220
    f442 = 39.3750 * sini2 * sini2
    f522 = 9.84375 * sinim * (sini2 * (1.0 - 2.0 * cosim - 5.0 * cosisq)
                              + 0.33333333 * (-2.0 + 4.0 * cosim + 6.0 * cosisq))
    f523 = sinim * (4.92187512 * sini2 * (-2.0 - 4.0 * cosim + 10.0 * cosisq)
                    + 6.56250012 * (1.0 + 2.0 * cosim - 3.0 * cosisq))
    f542 = 29.53125 * sinim * (2.0 - 8.0 * cosim + cosisq * (-12.0 + 8.0 * cosim + 10.0 * cosisq))
    f543 = 29.53125 * sinim * (-2.0 - 8.0 * cosim + cosisq * (12.0 + 8.0 * cosim - 10.0 * cosisq))

    xno2 = nm * nm
    ainv2 = aonv * aonv
    temp1 = 3.0 * xno2 * ainv2
    temp = temp1 * ROOT22
    d2201 = temp * f220 * g201
    d2211 = temp * f221 * g211
    temp1 = temp1 * aonv
    temp = temp1 * ROOT32
    d3210 = temp * f321 * g310
    d3222 = temp * f322 * g322
    temp1 = temp1 * aonv
    temp = 2.0 * temp1 * ROOT44
    d4410 = temp * f441 * g410
    d4422 = temp * f442 * g422
    temp1 = temp1 * aonv
    temp = temp1 * ROOT52
    d5220 = temp * f522 * g520
    d5232 = temp * f523 * g532
    temp = 2.0 * temp1 * ROOT54
    d5421 = temp * f542 * g521
    d5433 = temp * f543 * g533

    return {'d2201': d2201, 'd2211': d2211, 'd3210': d3210, 'd3222': d3222, 'd4410': d4410, 'd4422': d4422,
            'd5220': d5220, 'd5232': d5232, 'd5421': d5421, 'd5433': d5433}


def _synchronousResonance(emsq: float, sinim: float, cosim: float, nm: float, aonv: float) -> dict:
    """Resonance coefficients of 24 hour orbits."""

    g200 = 1.0 + emsq * (-2.5 + 0.8125 * emsq)
    g310 = 1.0 + 2.0 * emsq
    g300 = 1.0 + emsq * (-6.0 + 6.60937 * emsq)
    f220 = 0.75 * (1.0 + cosim) * (1.0 + cosim)
    f311 = 0.9375 * sinim * sinim * (1.0 + 3.0 * cosim) - 0.75 * (1.0 + cosim)
    f330 = 1.0 + cosim
    f330 = 1.875 * f330 * f330 * f330
    del1 = 3.0 * nm * nm * aonv * aonv
    del2 = 2.0 * del1 * f220 * g200 * Q22
    del3 = 3.0 * del1 * f330 * g300 * Q33 * aonv
    del1 = del1 * f311 * g310 * Q31 * aonv

    return {'del1': del1, 'del2': del2, 'del3': del3}


def _resonanceRates(ds: DeepSpaceConstants, xli: float, xni: float, atime: float, argpo: float,
                    argpdot: float) -> (float, float, float):
    """Returns the first and second derivatives of mean motion and the rate of the mean longitude."""

    xldot = xni + ds.xfact
    if ds.irez == SYNCHRONOUS:
        xndt = ds.del1 * sin(xli - FASX2) + ds.del2 * sin(2.0 * (xli - FASX4)) \
            + ds.del3 * sin(3.0 * (xli - FASX6))
        xnddt = ds.del1 * cos(xli - FASX2) + 2.0 * ds.del2 * cos(2.0 * (xli - FASX4)) \
            + 3.0 * ds.del3 * cos(3.0 * (xli - FASX6))
    else:
        xomi = argpo + argpdot * atime
        x2omi = xomi + xomi
        x2li = xli + xli
        xndt = (ds.d2201 * sin(x2omi + xli - G22) + ds.d2211 * sin(xli - G22)
                + ds.d3210 * sin(xomi + xli - G32) + ds.d3222 * sin(-xomi + xli - G32)
                + ds.d4410 * sin(x2omi + x2li - G44) + ds.d4422 * sin(x2li - G44)
                + ds.d5220 * sin(xomi + xli - G52) + ds.d5232 * sin(-xomi + xli - G52)
                + ds.d5421 * sin(xomi + x2li - G54) + ds.d5433 * sin(-xomi + x2li - G54))
        xnddt = (ds.d2201 * cos(x2omi + xli - G22) + ds.d2211 * cos(xli - G22)
                 + ds.d3210 * cos(xomi + xli - G32) + ds.d3222 * cos(-xomi + xli - G32)
                 + ds.d5220 * cos(xomi + xli - G52) + ds.d5232 * cos(-xomi + xli - G52)
                 + 2.0 * (ds.d4410 * cos(x2omi + x2li - G44) + ds.d4422 * cos(x2li - G44)
                          + ds.d5421 * cos(xomi + x2li - G54) + ds.d5433 * cos(-xomi + x2li - G54)))

    return xndt, xnddt * xldot, xldot


def applySecular(ds: DeepSpaceConstants, tsince: float, gsto: float, noUnkozai: float, argpo: float,
                 argpdot: float, em: float, argpm: float, inclm: float, mm: float, nodem: float) -> tuple:
    """Applies lunar-solar secular rates and integrates the resonance terms to tsince minutes.

    The resonance integration is a fixed step Euler-Maclaurin scheme that always starts at epoch, so the result
    only depends on tsince. Returns (em, argpm, inclm, mm, nodem, nm)."""

    theta = fmod(gsto + tsince * RPTIM, TWOPI)
    em = em + ds.dedt * tsince
    inclm = inclm + ds.didt * tsince
    argpm = argpm + ds.domdt * tsince
    nodem = nodem + ds.dnodt * tsince
    mm = mm + ds.dmdt * tsince
    nm = noUnkozai

    if ds.irez != NO_RESONANCE:
        delt = STEP if tsince > 0.0 else -STEP
        atime = 0.0
        xni = noUnkozai
        xli = ds.xlamo

        # every step costs one evaluation, bounded by |tsince| / STEP
        while True:
            xndt, xnddt, xldot = _resonanceRates(ds, xli, xni, atime, argpo, argpdot)
            if abs(tsince - atime) < STEP:
                break
            xli = xli + xldot * delt + xndt * STEP2
            xni = xni + xndt * delt + xnddt * STEP2
            atime = atime + delt

        ft = tsince - atime
        nm = xni + xndt * ft + xnddt * ft * ft * 0.5
        xl = xli + xldot * ft + xndt * ft * ft * 0.5
        if ds.irez == SYNCHRONOUS:
            mm = xl - nodem - argpm + theta
        else:
            mm = xl - 2.0 * nodem + 2.0 * theta

    return em, argpm, inclm, mm, nodem, nm


def applyPeriodics(ds: DeepSpaceConstants, tsince: float, ep: float, inclp: float, nodep: float, argpp: float,
                   mp: float) -> (float, float, float, float, float):
    """Applies the long period lunar-solar periodics. Returns (ep, inclp, nodep, argpp, mp)."""

    # solar
    zm = ds.zmos + ZNS * tsince
    zf = zm + 2.0 * ZES * sin(zm)
    sinzf = sin(zf)
    f2 = 0.5 * sinzf * sinzf - 0.25
    f3 = -0.5 * sinzf * cos(zf)
    ses = ds.se2 * f2 + ds.se3 * f3
    sis = ds.si2 * f2 + ds.si3 * f3
    sls = ds.sl2 * f2 + ds.sl3 * f3 + ds.sl4 * sinzf
    sghs = ds.sgh2 * f2 + ds.sgh3 * f3 + ds.sgh4 * sinzf
    shs = ds.sh2 * f2 + ds.sh3 * f3

    # lunar
    zm = ds.zmol + ZNL * tsince
    zf = zm + 2.0 * ZEL * sin(zm)
    sinzf = sin(zf)
    f2 = 0.5 * sinzf * sinzf - 0.25
    f3 = -0.5 * sinzf * cos(zf)
    sel = ds.ee2 * f2 + ds.e3 * f3
    sil = ds.xi2 * f2 + ds.xi3 * f3
    sll = ds.xl2 * f2 + ds.xl3 * f3 + ds.xl4 * sinzf
    sghl = ds.xgh2 * f2 + ds.xgh3 * f3 + ds.xgh4 * sinzf
    shll = ds.xh2 * f2 + ds.xh3 * f3

    pe = ses + sel
    pinc = sis + sil
    pl = sls + sll
    pgh = sghs + sghl
    ph = shs + shll

    inclp = inclp + pinc
    ep = ep + pe
    sinip = sin(inclp)
    cosip = cos(inclp)

    if inclp >= 0.2:
        ph = ph / sinip
        pgh = pgh - cosip * ph
        argpp = argpp + pgh
        nodep = nodep + ph
        mp = mp + pl
    else:
        # Lyddane modification for low inclinations
        sinop = sin(nodep)
        cosop = cos(nodep)
        alfdp = sinip * sinop
        betdp = sinip * cosop
        dalf = ph * cosop + pinc * cosip * sinop
        dbet = -ph * sinop + pinc * cosip * cosop
        alfdp = alfdp + dalf
        betdp = betdp + dbet
        nodep = fmod(nodep, TWOPI)
        xls = mp + argpp + cosip * nodep
        dls = pl + pgh - pinc * nodep * sinip
        xls = xls + dls
        xnoh = nodep
        nodep = atan2(alfdp, betdp)
        if abs(xnoh - nodep) > pi:
            if nodep < xnoh:
                nodep = nodep + TWOPI
            else:
                nodep = nodep - TWOPI
        mp = mp + pl
        argpp = xls - mp - cosip * nodep

    return ep, inclp, nodep, argpp, mp
