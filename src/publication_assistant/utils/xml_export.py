"""
Serialize DTO lists into the XML dump produced by `GET /GetAllAsXml`.

Document layout (element names are the PascalCase DTO field names):

    <?xml version='1.0' encoding='utf-8'?>
    <ArrayOfPublicationBaseDTO xmlns:xsi="..." xmlns:xsd="...">
      <PublicationBaseDTO>
        <Id>1</Id>
        <Title>...</Title>
        <Year>2021</Year>
        <PublicationType>article</PublicationType>
      </PublicationBaseDTO>
      ...
    </ArrayOfPublicationBaseDTO>

Fields whose value is None are omitted.
"""

import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Iterable

from pydantic import BaseModel

XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
XSD_NS = "http://www.w3.org/2001/XMLSchema"


def to_pascal_case(name: str) -> str:
    """publication_type -> PublicationType"""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def _text(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def dtos_to_xml(dtos: Iterable[BaseModel], item_name: str) -> bytes:
    """
    Build the XML document for a list of DTOs.

    Args:
        dtos: pydantic models of one type.
        item_name: element name of each item; the root becomes `ArrayOf{item_name}`.

    Returns:
        UTF-8 encoded XML bytes, with declaration.
    """
    root = ET.Element(
        f"ArrayOf{item_name}",
        {"xmlns:xsi": XSI_NS, "xmlns:xsd": XSD_NS},
    )

    for dto in dtos:
        item = ET.SubElement(root, item_name)
        for field, value in dto.model_dump().items():
            if value is None:
                continue
            ET.SubElement(item, to_pascal_case(field)).text = _text(value)

    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def export_file_name(prefix: str, now: datetime | None = None) -> str:
    """`DumpAll_20240131235959.xml` style attachment name."""
    now = now or datetime.now()
    return f"{prefix}_{now:%Y%m%d%H%M%S}.xml"
