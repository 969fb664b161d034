import pytest

from labkernel.dpartition import DynamicPartition
from labkernel.memory import AllocationError, PhysicalMemory

BASE = 0x100000
TOTAL = 0x100


@pytest.fixture
def memory():
    return PhysicalMemory(BASE, 0x1000)


@pytest.fixture
def dp(memory):
    return DynamicPartition(memory, BASE, TOTAL)


def assert_contiguous(dp):
    blocks = dp.walk()
    for first, second in zip(blocks, blocks[1:]):
        assert first.start + first.size == second.start
    assert blocks[-1].start + blocks[-1].size == BASE + TOTAL


def test_too_small_rejected(memory):
    with pytest.raises(ValueError):
        DynamicPartition(memory, BASE, 15)


def test_fresh_partition_has_one_free_block(dp):
    blocks = dp.walk()
    assert len(blocks) == 1
    assert dp.free_blocks() == blocks
    assert blocks[0].next_start == 0
    assert dp.size == TOTAL
    assert_contiguous(dp)


def test_header_text(dp):
    assert str(dp).startswith("dPartition(start=0x100000, size=0x100,")


def test_block_text(dp):
    assert str(dp.walk()[0]).startswith("EMB(start=0x")


def test_allocations_are_writable_and_distinct(dp, memory):
    a = dp.alloc(0x10)
    b = dp.alloc(0x20)
    c = dp.alloc(0x30)
    memory.write_word(a, 0xAAAAAAAA)
    memory.write_word(b, 0xBBBBBBBB)
    memory.write_word(c, 0xCCCCCCCC)
    assert memory.read_word(a) == 0xAAAAAAAA
    assert memory.read_word(b) == 0xBBBBBBBB
    assert memory.read_word(c) == 0xCCCCCCCC
    assert a < b < c
    assert all(addr % 4 == 0 for addr in (a, b, c))
    assert_contiguous(dp)


@pytest.mark.parametrize("order", [(0, 1, 2), (2, 1, 0), (1, 0, 2)])
def test_free_in_any_order_restores_partition(dp, memory, order):
    initial = dp.free_blocks()
    addrs = [dp.alloc(0x10), dp.alloc(0x20), dp.alloc(0x30)]
    for addr, value in zip(addrs, (0xAAAAAAAA, 0xBBBBBBBB, 0xCCCCCCCC)):
        memory.write_word(addr, value)
    for i in order:
        dp.free(addrs[i])
        assert_contiguous(dp)
    assert dp.free_blocks() == initial


def test_first_fit_reuses_lowest_hole(dp):
    a = dp.alloc(0x10)
    dp.alloc(0x20)
    dp.free(a)
    assert dp.alloc(0x10) == a


def test_doubling_until_failure(dp):
    initial = dp.free_blocks()
    size = 0x10
    with pytest.raises(AllocationError):
        while True:
            addr = dp.alloc(size)
            dp.free(addr)
            assert dp.free_blocks() == initial
            size <<= 1
    assert size <= TOTAL
    assert dp.free_blocks() == initial


def test_too_large_allocation_fails(dp):
    with pytest.raises(AllocationError):
        dp.alloc(TOTAL)


def test_zero_and_small_allocations_use_minimum_block(memory):
    first = DynamicPartition(memory, BASE, TOTAL)
    second = DynamicPartition(memory, BASE + 0x200, TOTAL)
    first.alloc(0)
    second.alloc(4)
    assert first.free_blocks()[0].size == second.free_blocks()[0].size


def test_negative_size_rejected(dp):
    with pytest.raises(ValueError):
        dp.alloc(-1)


def test_free_before_partition_rejected(dp):
    with pytest.raises(ValueError):
        dp.free(BASE)


def test_double_free_rejected(dp):
    a = dp.alloc(0x10)
    dp.alloc(0x10)
    dp.free(a)
    with pytest.raises(ValueError):
        dp.free(a)


def test_exhaust_then_free(dp):
    initial = dp.free_blocks()
    addrs = []
    with pytest.raises(AllocationError):
        while True:
            addrs.append(dp.alloc(0x10))
    assert dp.free_blocks() == [] or dp.free_blocks()[0].size < 0x10 + 4
    for addr in addrs:
        dp.free(addr)
    assert dp.free_blocks() == initial