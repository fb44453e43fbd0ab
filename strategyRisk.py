import sys
import datetime as dt
import numpy as np,scipy.stats as ss
import pandas as pd

# tolerance of the frequency self-check in binFreq, coarse by construction
FREQ_CHECK_TOL = .5
# dispersion of the precision rate in probFailure, applied as a std (not a std error)
precisionDispersion = lambda p: p * (1 - p)


class NumericDomainError(ValueError):
    """No real solution exists for the given inputs"""


class DegenerateInputError(ValueError):
    """Inputs outside the domain where the bet model is meaningful"""


class UnsatisfiableError(ValueError):
    """The frequency solver found no frequency within tolerance"""


class FreqSolution:
    """
    Tagged result of binFreq
    satisfiable: bool, whether the closed-form frequency passed the self-check
    candidate: float, the closed-form frequency before the check (diagnostics only)
    freq: float, the frequency, raises UnsatisfiableError if not satisfiable
    """
    def __init__(self, candidate, satisfiable):
        self.candidate = candidate
        self.satisfiable = bool(satisfiable)

    @property
    def freq(self):
        if not self.satisfiable:
            raise UnsatisfiableError('no frequency reaches the target SR, candidate %s failed the check'
                                     % self.candidate)
        return self.candidate

    def __bool__(self):
        return self.satisfiable

    def __repr__(self):
        if self.satisfiable:
            return 'FreqSolution(freq=%r)' % self.candidate
        return 'FreqSolution(unsatisfiable, candidate=%r)' % self.candidate


def getRNG(rng = None):
    # int seed, np.random.Generator or None (fresh entropy) -> Generator
    return np.random.default_rng(rng)

def _checkThresholds(sl, pt):
    if not pt > sl:
        raise DegenerateInputError('profit taking %s must exceed stop loss %s' % (pt, sl))
#———————————————————————————————————————
def sharpeRatioTrials(p, nRun, rng = None):
    """
    Sharpe ratio of a sequence of binary bets, each paying +1 with probability p and -1 otherwise
    1) Inputs
    p: probability of a winning bet
    nRun: number of bets
    rng: seed or np.random.Generator
    2) Output
    (mean, std, SR) of the outcomes, std is the population std (ddof = 0)
    If all outcomes are identical std is 0 and SR is +inf/-inf with the sign of the mean
    """
    if not 0 <= p <= 1:
        raise DegenerateInputError('p must lie in [0,1], got %s' % p)
    if int(nRun) < 1:
        raise DegenerateInputError('nRun must be at least 1, got %s' % nRun)
    rng = getRNG(rng)
    # success -> +1, failure -> -1
    out = np.where(rng.binomial(1, p, size = int(nRun)) == 1, 1., -1.)
    mean, std = out.mean(), out.std()
    with np.errstate(divide = 'ignore'):
        sr = np.float64(mean) / std
    return float(mean), float(std), float(sr)
#———————————————————————————————————————
def getSR(sl, pt, freq, p):
    """
    Annualized Sharpe ratio of a binary strategy
    sl: stop loss threshold
    pt: profit taking threshold
    freq: number of bets per year
    p: precision rate
    """
    return (((pt - sl) * p + sl) * freq**.5) / ((pt - sl) * (p * (1 - p))**.5)

def binSRCoeffs(sl, pt, freq, tSR):
    # coefficients of the quadratic a*p**2 + b*p + c = 0 in the precision rate p
    a = (freq + tSR**2) * (pt - sl)**2
    b = (2 * freq * sl - tSR**2 * (pt - sl)) * (pt - sl)
    c = freq * sl**2
    return a, b, c

def impliedPrecision(sl, pt, freq, tSR):
    """
    Given a trading rule characterized by the parameters {sl,pt,freq},
    what's the min precision p required to achieve a Sharpe ratio tSR?
    1) Inputs
    sl: stop loss threshold
    pt: profit taking threshold
    freq: number of bets per year
    tSR: target annual Sharpe ratio
    2) Output
    p: the min precision rate p required to achieve tSR
    Raises NumericDomainError when the discriminant is negative (no real root)
    and ZeroDivisionError when the quadratic term vanishes
    """
    _checkThresholds(sl, pt)
    a, b, c = binSRCoeffs(sl, pt, freq, tSR)
    disc = b**2 - 4 * a * c
    if disc < 0:
        raise NumericDomainError('negative discriminant %s: no precision reaches tSR=%s '
                                 'with sl=%s, pt=%s, freq=%s' % (disc, tSR, sl, pt, freq))
    if a == 0:
        raise ZeroDivisionError('degenerate quadratic: freq + tSR**2 is zero')
    # only the '+' root
    p = (-b + disc**.5) / (2. * a)
    return float(p)

def binFreq(sl, pt, p, tSR):
    """
    Given a trading rule characterized by the parameters {sl,pt,freq},
    what's the number of bets/year needed to achieve a Sharpe ratio
    tSR with precision rate p?
    Note: Equation with radicals, check for extraneous solution.
    1) Inputs
    sl: stop loss threshold
    pt: profit taking threshold
    p: precision rate p
    tSR: target annual Sharpe ratio
    2) Output
    FreqSolution, unsatisfiable when the implied SR misses tSR by more than FREQ_CHECK_TOL.
    The tolerance is a sanity check against the extraneous root, not an accuracy guarantee.
    """
    _checkThresholds(sl, pt)
    if not 0 < p < 1:
        raise DegenerateInputError('p must lie in (0,1), got %s' % p)
    edge = (pt - sl) * p + sl # expected return per bet
    if edge == 0:
        raise ZeroDivisionError('zero expected return per bet: (pt - sl) * p + sl == 0')
    freq = (tSR * (pt - sl))**2 * p * (1 - p) / edge**2 # possible extraneous
    ok = np.isclose(getSR(sl, pt, freq, p), tSR, rtol = 0, atol = FREQ_CHECK_TOL) # CHECK
    return FreqSolution(float(freq), ok)
#———————————————————————————————————————
def mixGaussians(mu1, mu2, sigma1, sigma2, prob1, nObs, rng = None):
    """
    Random draws from a mixture of gaussians
    int(nObs * prob1) draws come from N(mu1, sigma1), the rest of int(nObs) from N(mu2, sigma2).
    A regime may be empty (prob1 = 0 or 1). Draws are shuffled, so order carries no regime information.
    """
    if not 0 <= prob1 <= 1:
        raise DegenerateInputError('prob1 must lie in [0,1], got %s' % prob1)
    if int(nObs) < 1:
        raise DegenerateInputError('nObs must be at least 1, got %s' % nObs)
    rng = getRNG(rng)
    ret1 = rng.normal(mu1, sigma1, size = int(nObs * prob1))
    ret2 = rng.normal(mu2, sigma2, size = int(nObs) - ret1.shape[0])
    ret = np.append(ret1, ret2, axis = 0)
    rng.shuffle(ret)
    return ret
#———————————————————————————————————————
def probFailure(ret, freq, tSR):
    # Derive probability that strategy may fail
    ret = np.asarray(ret, dtype = float)
    if not np.isfinite(ret).all():
        raise DegenerateInputError('returns must be finite, got %d non-finite values'
                                   % (~np.isfinite(ret)).sum())
    if not (ret > 0).any() or not (ret <= 0).any():
        raise DegenerateInputError('returns need both positive and non-positive values')
    rPos = ret[ret > 0].mean() # mean pos return
    rNeg = ret[ret <= 0].mean() # mean neg return
    p = ret[ret > 0].shape[0] / float(ret.shape[0]) # prob. of pos return (precision rate)
    thresP = impliedPrecision(rNeg, rPos, freq, tSR) # calculate the threshold P for given SR
    risk = ss.norm.cdf(thresP, p, precisionDispersion(p)) # approximation to bootstrap
    return float(risk)

def reportProbability(probF, out = None):
    # Report the failure probability on the operator channel (stderr by default)
    if out is None:
        out = sys.stderr
    timeStamp = str(dt.datetime.now())
    out.write(timeStamp + ' Prob strategy will fail ' + str(probF) + '\n')
    return

def calcStrategyRisk(mu1, mu2, sigma1, sigma2, prob1, nObs, freq, tSR, rng = None, report = False):
    """
    Probability that a strategy with mixture-of-gaussians returns misses the target SR
    mu1, mu2, sigma1, sigma2, prob1, nObs: see mixGaussians
    freq: number of bets per year
    tSR: target annual Sharpe ratio
    rng: seed or np.random.Generator, same seed -> same probability
    report: bool, also write the probability with reportProbability
    """
    ret = mixGaussians(mu1, mu2, sigma1, sigma2, prob1, nObs, rng = rng)
    probF = probFailure(ret, freq, tSR)
    if report:
        reportProbability(probF)
    return probF
#———————————————————————————————————————
def precisionFrontier(sl, pt, freqs, tSR):
    # implied precision for each betting frequency, NaN where no real solution exists
    out = []
    for freq in freqs:
        try:
            out.append(impliedPrecision(sl, pt, freq, tSR))
        except (NumericDomainError, ZeroDivisionError):
            out.append(np.nan)
    return pd.Series(out, index = pd.Index(freqs, name = 'freq'), name = 'precision')

def freqFrontier(sl, pt, precisions, tSR):
    # required bets per year for each precision rate, NaN where unsatisfiable
    # (including break-even precision, where no frequency reaches tSR)
    out = []
    for p in precisions:
        try:
            sol = binFreq(sl, pt, p, tSR)
        except ZeroDivisionError:
            out.append(np.nan)
            continue
        out.append(sol.freq if sol else np.nan)
    return pd.Series(out, index = pd.Index(precisions, name = 'precision'), name = 'freq')

def failureCurve(ret, freq, tSRs):
    # failure probability of the same returns against a range of target SRs
    out = [probFailure(ret, freq, tSR) for tSR in tSRs]
    return pd.Series(out, index = pd.Index(tSRs, name = 'tSR'), name = 'probF')

def simStrategyRisk(mu1, mu2, sigma1, sigma2, prob1, nObs, freq, tSR, nPaths = 100, seed = None):
    """
    Failure probability over nPaths independent mixture samples
    Each path draws from its own child generator of a single SeedSequence,
    so path i is the same whatever nPaths is
    """
    children = np.random.SeedSequence(seed).spawn(int(nPaths))
    out = [calcStrategyRisk(mu1, mu2, sigma1, sigma2, prob1, nObs, freq, tSR,
                            rng = np.random.default_rng(child)) for child in children]
    return pd.Series(out, index = pd.RangeIndex(len(out), name = 'path'), name = 'probF')
#———————————————————————————————————————
def main():
    #1) Parameters
    params = {'mu1': .05, 'mu2': -.1, 'sigma1': .05, 'sigma2': .1, 'prob1': .75, 'nObs': 2600}
    tSR, freq = 2., 260
    #2) Generate sample from mixture, 3) compute prob failure
    probF = calcStrategyRisk(freq = freq, tSR = tSR, **params)
    reportProbability(probF)
    return
#———————————————————————————————————————
if __name__=='__main__':main()
