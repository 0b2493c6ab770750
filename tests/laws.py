from typing import Any, Callable

from monadic.functions import identity

Of = Callable[[Any], Any]
Observe = Callable[[Any], Any]


def f(x: int) -> int:
    return x + 1


def g(x: int) -> int:
    return x * 2


def check_functor_laws(m: Any, observe: Observe = identity) -> None:
    assert observe(m.map(identity)) == observe(m)
    assert observe(m.map(f).map(g)) == observe(m.map(lambda x: g(f(x))))


def check_applicative_laws(of: Of, observe: Observe = identity) -> None:
    a = of(3)
    # identity
    assert observe(of(identity).ap(a)) == observe(a)
    # homomorphism
    assert observe(of(g).ap(of(3))) == observe(of(g(3)))
    # interchange
    u = of(g)
    assert observe(u.ap(of(3))) == observe(of(lambda fn: fn(3)).ap(u))
    # composition
    compose = lambda x: lambda y: lambda z: x(y(z))  # noqa: E731
    v = of(f)
    w = of(4)
    assert observe(of(compose).ap(u).ap(v).ap(w)) == observe(u.ap(v.ap(w)))


def check_monad_laws(of: Of, m: Any, observe: Observe = identity) -> None:
    def k(x: int) -> Any:
        return of(x * 2)

    def h(x: int) -> Any:
        return of(x - 3)

    # left identity
    assert observe(of(42).flat_map(k)) == observe(k(42))
    # right identity
    assert observe(m.flat_map(of)) == observe(m)
    # associativity
    assert observe(m.flat_map(k).flat_map(h)) == observe(
        m.flat_map(lambda x: k(x).flat_map(h))
    )
