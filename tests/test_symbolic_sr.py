import pytest

sympy = pytest.importorskip('sympy')

import symbolicSR
from symbolicSR import p, u, d, n, t, targetSRSymbolic, getSRSymbolic, impliedPrecisionCoeffs, impliedPrecisionCoeffsAt
from strategyRisk import binSRCoeffs, getSR, impliedPrecision


def test_target_sr_symbolic_factored():
    v = targetSRSymbolic()
    assert isinstance(v, sympy.Mul)
    assert sympy.simplify(v - p * (1 - p) * (u - d)**2) == 0


def test_target_sr_symbolic_unfactored_fallback(monkeypatch):
    def fail(expr):
        raise sympy.PolynomialError('cannot factor')
    monkeypatch.setattr(symbolicSR, 'factor', fail)
    v = targetSRSymbolic()
    assert v == sympy.expand(p * u**2 + (1 - p) * d**2 - (p * u + (1 - p) * d)**2)


def test_implied_precision_coeffs_symbolic():
    a, b, c = impliedPrecisionCoeffs()
    assert sympy.expand(a - (n + t**2) * (u - d)**2) == 0
    assert sympy.expand(b - (2 * n * d - t**2 * (u - d)) * (u - d)) == 0
    assert sympy.expand(c - n * d**2) == 0


@pytest.mark.parametrize('sl, pt, freq, tSR', [(-0.05, 0.10, 260, 2.), (-0.03, 0.05, 52, 1.5)])
def test_implied_precision_coeffs_match_numeric(sl, pt, freq, tSR):
    assert impliedPrecisionCoeffsAt(sl, pt, freq, tSR) == pytest.approx(binSRCoeffs(sl, pt, freq, tSR))


def test_get_sr_symbolic_matches_numeric():
    prec = impliedPrecision(-0.05, 0.10, 260, 2.)
    sr = getSRSymbolic().subs({p: prec, u: 0.10, d: -0.05, n: 260})
    assert float(sr) == pytest.approx(getSR(-0.05, 0.10, 260, prec))
    assert float(sr) == pytest.approx(2., abs=1e-6)
