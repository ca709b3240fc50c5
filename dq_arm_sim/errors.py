"""Exceptions raised by the kinematic-chain core."""


class ChainConfigError(ValueError):
    """The chain configuration cannot describe a valid arm (caught at load time)."""


class ChainIndexError(IndexError):
    """A segment refers to a joint prefix that does not exist."""

    def __init__(self, chain_index: int, joint_count: int):
        super().__init__(
            f"chain index {chain_index} out of range for {joint_count} joint(s)"
        )
        self.chain_index = chain_index
        self.joint_count = joint_count
