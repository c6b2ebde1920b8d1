"""The example function: always answers ``"hello"``.

Deploy targets:
    AWS managed Python runtime  → handler ``fnshim.functions.hello.lambda_handler``
    Any stdio-speaking host     → ``fnshim-hello`` (or ``python -m fnshim``)
"""

from __future__ import annotations

from fnshim.core.result import Ok, Result
from fnshim.runtime.context import InvocationContext
from fnshim.runtime.hosts import lambda_adapter
from fnshim.runtime.lifecycle import start
from fnshim.runtime.registry import register_function

GREETING = "hello"


@register_function("hello", description="Return the fixed greeting.")
def handler(ctx: InvocationContext) -> Result[str]:
    # Returns immediately, so the deadline and cancellation signal are not consulted.
    return Ok(GREETING)


lambda_handler = lambda_adapter(handler, name="hello")


def main() -> None:
    start(handler, name="hello")


if __name__ == "__main__":
    main()
