"""VM configuration loaded with OmegaConf.

A configuration can come from a YAML file, a mapping or a dotlist of
overrides, and is validated against the :class:`VMConfig` schema::

    entry_point: 0x200
    seed: 0
    trace_length: 100
    preset: cosmac
    quirks:
      display_wait: false
"""

import dataclasses
import os
from typing import Dict, List, Mapping, Optional, Union

from omegaconf import OmegaConf

from chip8vm.constants import PROGRAM_START
from chip8vm.quirks import Quirks


@dataclasses.dataclass
class VMConfig:
    """Settings for a :class:`chip8vm.vm.Chip8` instance.

    Attributes:
        entry_point: Address programs are loaded at and execution starts from
        seed: Seed for the ``RND`` instruction's random key
        trace_length: Number of executed instructions kept in the history
        preset: Base quirk preset ("modern", "cosmac" or "schip")
        quirks: Individual quirk flags overriding the preset
    """
    entry_point: int = PROGRAM_START
    seed: int = 0
    trace_length: int = 100
    preset: str = "modern"
    quirks: Dict[str, bool] = dataclasses.field(default_factory=dict)

    def build_quirks(self) -> Quirks:
        valid = {f.name for f in dataclasses.fields(Quirks)}
        unknown = set(self.quirks) - valid
        if unknown:
            raise ValueError(
                f"Unknown quirk flags {sorted(unknown)}. Available: {sorted(valid)}"
            )
        return dataclasses.replace(Quirks.preset(self.preset), **self.quirks)


def load_config(
    source: Optional[Union[str, os.PathLike, Mapping]] = None,
    dotlist: Optional[List[str]] = None,
) -> VMConfig:
    """Merge a YAML file or mapping, then dotlist overrides, over the defaults.

    Raises:
        omegaconf.errors.ValidationError: a value has the wrong type
        omegaconf.errors.ConfigKeyError: a key is not part of the schema
    """
    cfg = OmegaConf.structured(VMConfig)

    if isinstance(source, (str, os.PathLike)):
        cfg = OmegaConf.merge(cfg, OmegaConf.load(source))
    elif source is not None:
        cfg = OmegaConf.merge(cfg, OmegaConf.create(dict(source)))

    if dotlist:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(dotlist))

    return OmegaConf.to_object(cfg)
