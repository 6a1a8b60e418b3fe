"""Printing tools.
"""

from tensym.permutations import cycles


def format_cycles(permutation):
    """Format a permutation in disjoint cycle notation.

    Parameters
    ----------
    permutation : tuple of int
        The permutation in one-line notation.

    Returns
    -------
    string : str
        The cycle notation, e.g. ``"(0 1)(2 4 3)"``. The identity is
        formatted as ``"()"``.
    """
    parts = ["(" + " ".join(map(str, cycle)) + ")" for cycle in cycles(permutation)]
    return "".join(parts) or "()"


def format_symmetry(permutation, sign):
    """Format a signed permutation.

    Parameters
    ----------
    permutation : tuple of int
        The permutation in one-line notation.
    sign : bool
        Whether the permutation negates the object it acts on.

    Returns
    -------
    string : str
        The one-line notation followed by the sign, e.g. ``"[1, 0, 2](-)"``.
    """
    return f"{list(permutation)}({'-' if sign else '+'})"
