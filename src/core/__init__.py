"""
Core numeric primitives: Beta function, its logarithm and the incomplete
Beta function (Beta distribution CDF).

Independent of any I/O; every call is pure and reentrant.
"""
