"""TreeRenderer protocol — stable interface for tree renderers.

Any renderer that implements ``render(node) -> str`` conforms to this protocol.
The built-in ``XmqRenderer`` is the reference implementation.

Example:
    from xmq.renderers.protocol import TreeRenderer

    def write_config(renderer: TreeRenderer, doc: Document) -> str:
        return renderer.render(doc)

"""

from typing import Protocol

from xmq.nodes import Document


class TreeRenderer(Protocol):
    """Protocol for tree renderers.

    Implementations must accept a Document and return a rendered string.

    """

    def render(self, node: Document) -> str:
        """Render a Document to a string.

        Args:
            node: The document to render.

        Returns:
            Rendered string output.

        """
        ...
