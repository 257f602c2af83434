from dataclasses import dataclass


# Unit of work for one fetch-and-append round
@dataclass(frozen=True)
class BlockWindow:
    window_id: int
    blocks: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.blocks)

    @property
    def first_block(self) -> int | None:
        return self.blocks[0] if self.blocks else None

    @property
    def last_block(self) -> int | None:
        return self.blocks[-1] if self.blocks else None
