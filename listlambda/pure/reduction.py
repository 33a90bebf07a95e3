"""Substitution-based reduction of listlambda expressions.

Reduction is leftmost and call-by-name: the head of an application is reduced as far as it goes before any argument is
looked at, and arguments are substituted unevaluated. Arguments only get evaluated once they end up in a residual
application whose head cannot consume them.

Nothing here is bounded. A divergent term such as ((x.(x x)) (x.(x x))) recurses until Python raises RecursionError,
which is deliberately left to the caller.
"""

from collections import deque

from listlambda.pure.lexical import Application, Builtin, Lambda, List


def evaluate(expr, on_step=None):
    """Reduces expr toward normal form and returns the result. Never fails, but may not terminate, and may return a stuck
    residual Application. on_step(rule, expr), if given, is called after every beta step (rule "β") and builtin
    dispatch (rule is the keyword).
    """
    if isinstance(expr, Application):
        return _evaluate_application(expr, on_step)
    elif isinstance(expr, Lambda):
        return Lambda(expr.param, evaluate(expr.body, on_step))
    return expr  # Constant, Builtin, List


def _evaluate_application(expr, on_step):
    head, *rest = expr.items
    args = deque(rest)

    while isinstance(head, Lambda) and args:
        head = head.body.sub(head.param, args.popleft())
        _step(on_step, "β", head)

    if isinstance(head, Builtin) and args and isinstance(args[0], List):
        head = dispatch(head, args.popleft(), on_step)

    if args:
        return Application([evaluate(head, on_step)] + [evaluate(arg, on_step) for arg in args])
    return evaluate(head, on_step)


def dispatch(builtin, lst, on_step=None):
    """Applies builtin to List lst.

    - hd: one-element List with the first element of lst, or an empty List
    - tl: lst without its first element (empty stays empty)
    - eval: evaluates the elements of lst as an application, in source order
    """
    if builtin.keyword == Builtin.HD:
        result = lst.head
    elif builtin.keyword == Builtin.TL:
        result = lst.tail
    else:
        result = evaluate(unquote(lst), on_step)  # steps of the quoted program are reported before its result

    _step(on_step, builtin.keyword, result)
    return result


def unquote(lst):
    """Turns a List into the expression it quotes. A single element is the element itself; an empty List quotes
    nothing, so it is returned as is.
    """
    items = lst.source_order
    if not items:
        return lst
    elif len(items) == 1:
        return items[0]
    return Application(items)


def is_stuck(expr):
    """Whether expr is an application whose head can never consume its first argument: neither a Lambda nor a Builtin
    followed by a List.
    """
    if not isinstance(expr, Application):
        return False

    head, arg = expr.items[:2]
    if isinstance(head, Lambda):
        return False
    return not (isinstance(head, Builtin) and isinstance(arg, List))


def _step(on_step, rule, expr):
    if on_step is not None:
        on_step(rule, expr)
