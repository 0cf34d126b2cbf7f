"""Version scope policy: does a field exist under a given ID3v2 revision?

A field applies to every revision unless its catalog entry (or its frame's
entry) declares a range that excludes the revision. Ranges are inclusive and
either bound may be open. Identities the catalog does not know are never in
scope.
"""

import logging
from typing import Optional

from .catalog import FRAME_DEFS, FieldDef, FrameDef, FrameID
from .constants import FieldID, V2Spec

logger = logging.getLogger(__name__)


class ScopeRange:
    """Inclusive range of spec versions; None bounds are open-ended."""

    def __init__(self, begin: Optional[V2Spec] = None, end: Optional[V2Spec] = None):
        if begin is not None and end is not None and begin > end:
            raise ValueError(f"Scope range ends ({end.name}) before it begins ({begin.name})")
        self.begin = begin
        self.end = end

    def __repr__(self):
        begin = self.begin.name if self.begin is not None else '*'
        end = self.end.name if self.end is not None else '*'
        return f'ScopeRange({begin}..{end})'

    def __eq__(self, other):
        if not isinstance(other, ScopeRange):
            return NotImplemented
        return (self.begin, self.end) == (other.begin, other.end)

    def __contains__(self, spec) -> bool:
        return self.contains(spec)

    @staticmethod
    def of(definition) -> 'ScopeRange':
        """Return the range declared by a FieldDef or FrameDef."""
        return ScopeRange(definition.spec_begin, definition.spec_end)

    @property
    def is_open(self) -> bool:
        return self.begin is None or self.end is None

    def contains(self, spec: V2Spec) -> bool:
        spec = V2Spec(spec)
        if self.begin is not None and spec < self.begin:
            return False
        if self.end is not None and spec > self.end:
            return False
        return True


def field_def_in_scope(field_def: Optional[FieldDef], spec: V2Spec,
                       frame_def: Optional[FrameDef] = None) -> bool:
    """Evaluate the policy for an already resolved definition."""
    if field_def is None or field_def.field_id == FieldID.NOFIELD:
        return False
    if frame_def is not None and not ScopeRange.of(frame_def).contains(spec):
        return False
    return ScopeRange.of(field_def).contains(spec)


def in_scope(field_id: FieldID, spec: V2Spec, frame_id: Optional[FrameID] = None) -> bool:
    """Return True if the field applies under the spec version.

    Args:
        field_id: Field to look up
        spec: Tag spec version
        frame_id: Restrict the lookup to one frame. Without it the field is
            in scope if any frame that declares it applies.

    Returns:
        False for identities the catalog does not know
    """
    spec = V2Spec(spec)
    if frame_id is not None:
        frame_def = FRAME_DEFS.get(frame_id)
        if frame_def is None:
            logger.debug(f"Unknown frame {frame_id!r}: treating {field_id!r} as out of scope")
            return False
        return field_def_in_scope(frame_def.find_field(field_id), spec, frame_def)

    declared = False
    for frame_def in FRAME_DEFS.values():
        field_def = frame_def.find_field(field_id)
        if field_def is None:
            continue
        declared = True
        if field_def_in_scope(field_def, spec, frame_def):
            return True

    if not declared:
        logger.debug(f"Unknown field {field_id!r}: treating as out of scope")
    return False
