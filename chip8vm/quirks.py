"""Configurable behaviours where historical CHIP-8 interpreters disagree."""

import dataclasses


@dataclasses.dataclass(frozen=True)
class Quirks:
    """Quirk flags consulted by the instruction handlers.

    Instances are hashable and stored as static (non-pytree) data on the
    emulator state, so each distinct flag set gets its own compiled step.

    Attributes:
        shift_uses_vy: 8XY6/8XYE shift VY and store the result in VX
            (COSMAC VIP). When False, VX is shifted in place.
        load_store_increments_i: FX55/FX65 leave I pointing past the last
            register transferred (COSMAC VIP). When False, I is unchanged.
        jump_uses_vx: BXNN jumps to XNN + VX (CHIP-48/SCHIP). When False,
            BNNN jumps to NNN + V0.
        logic_resets_vf: 8XY1/8XY2/8XY3 clear VF (COSMAC VIP).
        display_wait: DXYN waits for the next timer tick before drawing,
            re-executing until then like the key wait.
        wrap_sprites: sprite pixels past the right or bottom edge wrap to
            the opposite edge. When False they are clipped.
    """
    shift_uses_vy: bool = False
    load_store_increments_i: bool = False
    jump_uses_vx: bool = False
    logic_resets_vf: bool = True
    display_wait: bool = False
    wrap_sprites: bool = True

    @classmethod
    def modern(cls) -> "Quirks":
        return cls()

    @classmethod
    def cosmac(cls) -> "Quirks":
        return cls(
            shift_uses_vy=True,
            load_store_increments_i=True,
            logic_resets_vf=True,
            display_wait=True,
            wrap_sprites=False,
        )

    @classmethod
    def schip(cls) -> "Quirks":
        return cls(
            jump_uses_vx=True,
            logic_resets_vf=False,
            wrap_sprites=False,
        )

    @classmethod
    def preset(cls, name: str) -> "Quirks":
        """Look up a named preset ("modern", "cosmac" or "schip")."""
        presets = {
            "modern": cls.modern,
            "cosmac": cls.cosmac,
            "schip": cls.schip,
        }

        if name not in presets:
            raise ValueError(
                f"Unknown quirk preset '{name}'. Available: {list(presets.keys())}"
            )

        return presets[name]()
