"""xmq renderers.

Renderers convert document trees (or token streams) into text.

Available Renderers:
- XmqRenderer: Renders a tree back to xmq, compact or indented
- TokenPrinter: Lists the tokens of a source, one per line

Thread Safety:
XmqRenderer keeps all per-render state local to render() and is safe to
share. TokenPrinter accumulates output and belongs to one caller.

"""

from xmq.renderers.tokens import TokenPrinter
from xmq.renderers.xmq import XmqRenderer

__all__ = ["TokenPrinter", "XmqRenderer"]
