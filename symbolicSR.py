from sympy import symbols, factor, expand, sqrt, Poly, PolynomialError

# p: precision rate, u: profit taking, d: stop loss, n: bets per year, t: target SR
p, u, d, n, t = symbols('p u d n t')

def targetSRSymbolic():
    """
    Variance of a bet paying u with probability p and d with probability 1-p
    V[X] = E[X^2] - E[X]^2, returned factored as p*(1-p)*(u-d)^2
    Falls back to the expanded form if the expression cannot be factored
    """
    m2 = p * u**2 + (1 - p) * d**2 # second moment
    m1 = p * u + (1 - p) * d # first moment
    v = m2 - m1**2 # variance
    try:
        return factor(v)
    except PolynomialError:
        return expand(v)

def getSRSymbolic():
    # annualized SR: mean / std per bet, times sqrt of bets per year
    return ((u - d) * p + d) / ((u - d) * sqrt(p * (1 - p))) * sqrt(n)

def impliedPrecisionCoeffs():
    """
    Square getSRSymbolic() = t and clear denominators, leaving a quadratic in p
    : return: (a, b, c) of a*p**2 + b*p + c = 0, in terms of u, d, n, t
    """
    eq = ((u - d) * p + d)**2 * n - t**2 * (u - d)**2 * p * (1 - p)
    a, b, c = Poly(expand(eq), p).all_coeffs()
    return factor(a), factor(b), factor(c)

def impliedPrecisionCoeffsAt(sl, pt, freq, tSR):
    # numerical (a, b, c) for a trading rule {sl,pt,freq} and target SR
    subs = {d: sl, u: pt, n: freq, t: tSR}
    return tuple(float(coeff.subs(subs)) for coeff in impliedPrecisionCoeffs())

def main():
    print('variance:', targetSRSymbolic())
    print('SR:', getSRSymbolic())
    for name, coeff in zip('abc', impliedPrecisionCoeffs()):
        print(name + ':', coeff)
    return

if __name__=='__main__':main()
