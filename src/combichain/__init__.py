from ._buffer import Buffer, EagerBuffer, LazyBuffer, SeqBuffer, SizedBuffer
from ._core import Config, Pipeable, get_config, set_config
from ._multi_product import Digit, MultiProduct, multi_cartesian_product
from ._permutation_state import PermutationState
from ._permutations import Permutations, permutations
from ._results import (
    NONE,
    Err,
    NoneOption,
    Ok,
    Option,
    OptionUnwrapError,
    Result,
    ResultUnwrapError,
    Some,
)
from ._size_hint import CountOverflowError, SizeHint

__all__ = [
    "NONE",
    "Buffer",
    "Config",
    "CountOverflowError",
    "Digit",
    "EagerBuffer",
    "Err",
    "LazyBuffer",
    "MultiProduct",
    "NoneOption",
    "Ok",
    "Option",
    "OptionUnwrapError",
    "Permutations",
    "PermutationState",
    "Pipeable",
    "Result",
    "ResultUnwrapError",
    "SeqBuffer",
    "SizeHint",
    "SizedBuffer",
    "Some",
    "get_config",
    "multi_cartesian_product",
    "permutations",
    "set_config",
]
