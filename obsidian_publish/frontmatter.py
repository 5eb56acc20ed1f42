"""YAML frontmatter split/load/dump used by both profiles."""

import re

import yaml

FM_BLOCK_RE = re.compile(r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


class QuotedDumper(yaml.SafeDumper):
    """Emit string values double-quoted (article platform convention); keys stay plain."""

    def represent_mapping(self, tag, mapping, flow_style=None):
        node = super().represent_mapping(tag, mapping, flow_style)
        for key_node, _ in node.value:
            if isinstance(key_node, yaml.ScalarNode):
                key_node.style = None
        return node


def _quoted_str(dumper: yaml.SafeDumper, data: str):
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style='"')


QuotedDumper.add_representer(str, _quoted_str)


def split_frontmatter_and_body(content: str) -> tuple[str | None, str]:
    m = FM_BLOCK_RE.match(content)
    if not m:
        return None, content
    return m.group(1) or "", content[m.end():]


def parse(content: str) -> tuple[dict, str]:
    """Return (metadata, body). Raises ValueError on malformed frontmatter."""
    fm_text, body = split_frontmatter_and_body(content)
    if fm_text is None:
        return {}, body
    try:
        data = yaml.safe_load(fm_text)
    except yaml.YAMLError as e:
        raise ValueError(f"invalid frontmatter: {e}") from e
    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise ValueError(f"frontmatter must be a mapping, got {type(data).__name__}")
    return data, body


def serialize(metadata: dict, body: str, quote_strings: bool = False) -> str:
    if body and not body.endswith("\n"):
        body += "\n"
    if not metadata:
        return body
    dumper = QuotedDumper if quote_strings else yaml.SafeDumper
    fm = yaml.dump(
        dict(metadata),
        Dumper=dumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    return f"---\n{fm}---\n{body}"
