from abc import ABC, abstractmethod

from docparse.core.models.document import DocumentInput, ParseRequest


class DocumentSourcePort(ABC):
    """Yields the bytes to parse for a request, from inline text or a blob store."""

    @abstractmethod
    async def load(self, request: ParseRequest) -> DocumentInput:
        """Return the document for `request`.

        Raises:
            DocumentInputError: the request names no usable document.
        """
        raise NotImplementedError
