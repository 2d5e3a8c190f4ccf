"""ListObjectsV2 response parser.

Matches elements on their local names, so default namespaces
(`http://s3.amazonaws.com/doc/2006-03-01/`) and prefixed ones parse the same.
"""

from lxml import etree

from s3gate.files.s3.clients.abstract import S3ParseClientException
from s3gate.files.s3.pydantic import S3ListPage, S3ObjectDescriptor

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=True)


def _local_name(element: etree._Element) -> str | None:
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def _child_text(element: etree._Element, name: str) -> str | None:
    for child in element:
        if _local_name(child) == name:
            return (child.text or "").strip()
    return None


def parse_list_objects_response(content: bytes, public_base: str) -> S3ListPage:
    """Parse a ListObjectsV2 XML body.

    Args:
        content: Raw response body.
        public_base: Base of public object URLs, without a trailing slash.

    Returns:
        The listed objects in document order, plus the truncation cursor.

    Raises:
        S3ParseClientException: If the body is not XML, a `<Contents>` block has
            no `<Key>`, or a `<Size>` is not an integer.

    """
    try:
        root = etree.fromstring(content, parser=_PARSER)
    except etree.XMLSyntaxError as exc:
        msg = f"List response is not valid XML: {exc}"
        raise S3ParseClientException(msg) from exc

    objects: list[S3ObjectDescriptor] = []
    for contents in root.iter():
        if _local_name(contents) != "Contents":
            continue

        key = _child_text(contents, "Key")
        if not key:
            msg = "List response has a <Contents> entry without a <Key>"
            raise S3ParseClientException(msg)

        raw_size = _child_text(contents, "Size")
        try:
            size = int(raw_size) if raw_size else 0
        except ValueError as exc:
            msg = f"List response has a non-integer <Size> for key {key!r}"
            raise S3ParseClientException(msg) from exc

        objects.append(
            S3ObjectDescriptor(
                key=key,
                size=size,
                last_modified=_child_text(contents, "LastModified") or "",
                public_url=f"{public_base}/{key}",
            )
        )

    is_truncated = (_child_text(root, "IsTruncated") or "").lower() == "true"
    next_token = _child_text(root, "NextContinuationToken") or None

    return S3ListPage(objects=objects, is_truncated=is_truncated, next_continuation_token=next_token)
