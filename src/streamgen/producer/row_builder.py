"""Row assembly - turns one generated record into a keyed row.

Each top-level field is handled according to the tags on its schema:

- `session`: the generated value goes through the session resolution policy;
  the result becomes the record's current session value.
- `session-sibling-int-hash`: an integer derived from the current session
  value, falling back to the generated value.
- `format_as_time`: the current wall-clock time.
- anything else: the generated value, converted to the row representation.

The key is taken from the raw generated record, before session substitution.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from streamgen.common.constants import FieldTags
from streamgen.common.exceptions import GeneratorContractViolation, InvalidConfigurationError
from streamgen.core.types import GenericRow
from streamgen.data.converters.avro import (
    make_optional,
    optional_value,
    register_named_types,
    resolve_type,
    to_row_schema,
)
from streamgen.data.generators.base_generator import BaseGenerator
from streamgen.data.schemas.row_schema import RowSchema, RowType
from streamgen.producer.time_format import TimeFormatter
from streamgen.sessions.manager import SessionManager
from streamgen.sessions.resolver import SessionResolver
from streamgen.sessions.sibling import SiblingLinker

logger = logging.getLogger(__name__)

INTEGER_TYPES = frozenset({RowType.INT32, RowType.INT64})


def field_tag(field: Dict[str, Any], tag: str, names: Optional[Dict[str, Any]] = None) -> Any:
    """Read a tag from the field's type schema, then from the field itself."""
    type_schema = _tagged_type(field["type"], names or {})
    if isinstance(type_schema, dict) and type_schema.get(tag) is not None:
        return type_schema[tag]
    return field.get(tag)


def _tagged_type(type_schema: Any, names: Dict[str, Any]) -> Any:
    # for nullable unions the tags live on the non-null branch
    if isinstance(type_schema, list):
        branches = [b for b in type_schema if b != "null"]
        type_schema = branches[0] if len(branches) == 1 else None
    if isinstance(type_schema, str) and type_schema in names:
        return names[type_schema]
    return type_schema


def build_row_schema(avro_schema: Dict[str, Any]) -> RowSchema:
    """Convert a generator's Avro schema into the widened (fully nullable) row schema."""
    return make_optional(to_row_schema(avro_schema, register_named_types(avro_schema, {})))


@dataclass(frozen=True)
class _FieldPlan:
    name: str
    type_schema: Any
    row_schema: RowSchema
    is_session: bool
    is_sibling: bool
    time_spec: Optional[str]


class RowAssembler:
    """Builds `(key, GenericRow)` pairs from a record generator."""

    def __init__(
        self,
        generator: BaseGenerator,
        key: str,
        resolver: Optional[SessionResolver] = None,
        linker: Optional[SiblingLinker] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """Validate the schema against the key and prepare per-field handling.

        Raises:
            InvalidConfigurationError: If the key field is missing, a field
                type cannot be widened to a nullable row schema, or a
                `format_as_time` pattern is not supported.
        """
        self.generator = generator
        self.key = key
        self.avro_schema = generator.schema()

        fields = self.avro_schema.get("fields", []) if isinstance(self.avro_schema, dict) else []
        if key not in {f["name"] for f in fields}:
            raise InvalidConfigurationError(f"Key field does not exist: {key}", field_name=key)

        names = register_named_types(self.avro_schema, {})
        self.row_schema = make_optional(to_row_schema(self.avro_schema, names))
        self.resolver = resolver or SessionResolver()
        self.linker = linker or SiblingLinker()
        self._now = now or (lambda: datetime.now().astimezone())
        self._key_schema = self.row_schema.field(key).field_schema
        self._plans: List[_FieldPlan] = [
            _FieldPlan(
                name=f["name"],
                type_schema=resolve_type(_tagged_type(f["type"], names), names),
                row_schema=self.row_schema.field(f["name"]).field_schema,
                is_session=field_tag(f, FieldTags.SESSION, names) is not None,
                is_sibling=field_tag(f, FieldTags.SESSION_SIBLING_INT_HASH, names) is not None,
                time_spec=field_tag(f, FieldTags.FORMAT_AS_TIME, names),
            )
            for f in fields
        ]
        self._formatters: Dict[str, TimeFormatter] = {
            str(plan.time_spec): TimeFormatter(str(plan.time_spec))
            for plan in self._plans
            if plan.time_spec is not None
        }

    @property
    def session_manager(self) -> SessionManager:
        return self.resolver.session_manager

    def _sibling_value(self, plan: _FieldPlan, session_value: str, generated: Any) -> Any:
        if plan.row_schema.type not in INTEGER_TYPES:
            return generated
        result = self.linker.link(session_value, plan.type_schema)
        if not result.ok:
            logger.debug(f"Sibling link failed for field '{plan.name}': {result.reason}")
            return generated
        return result.value

    def generate_row(self) -> Tuple[str, GenericRow]:
        """Generate one record and assemble its key and row.

        Raises:
            GeneratorContractViolation: If the generator does not return a record.
            TokenExhaustionError: If session tokens run out.
        """
        raw = self.generator.generate()
        if not isinstance(raw, dict):
            raise GeneratorContractViolation(
                f"Expected the generator to return a record, found {type(raw).__name__} instead",
                returned_type=type(raw).__name__,
            )

        columns: List[Any] = []
        session_value: Optional[str] = None
        moment: Optional[datetime] = None

        for plan in self._plans:
            generated = raw.get(plan.name)

            if plan.is_session:
                if generated is None:
                    columns.append(None)
                    continue
                session_value = self.resolver.resolve(str(generated), field_name=plan.name)
                columns.append(session_value)
            elif plan.is_sibling and session_value is not None:
                columns.append(self._sibling_value(plan, session_value, generated))
            elif plan.time_spec is not None:
                if moment is None:
                    moment = self._now()
                columns.append(self._formatters[str(plan.time_spec)].format(moment))
            else:
                columns.append(optional_value(plan.row_schema, generated))

        key_value = optional_value(self._key_schema, raw.get(self.key))
        key_string = "" if key_value is None else str(key_value)
        return key_string, GenericRow(columns)
