"""
Interactive key selection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import click

from sshare.common.exceptions import SelectionError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sshare.keys.key import Key


def describe_key(index: int, key: Key) -> str:
    return f"{index}. {key.name or key.key_type} ({key.fingerprint})"


def select_keys(
    keys: Sequence[Key],
    prompt_func: Callable[..., str] = click.prompt,
) -> list[Key]:
    """Ask which of the keys to share.

    Keys are listed with 1-based indices; the answer is a comma or space
    separated list of indices, or ``all``.

    Raises:
        SelectionError: If the prompt is aborted, nothing is chosen, or an
            index is out of range
    """
    click.echo("Select the keys that you would like to share:")
    for idx, key in enumerate(keys, start=1):
        click.echo(f"  {describe_key(idx, key)}")

    try:
        answer = prompt_func("Keys", default="all", show_default=True)
    except click.Abort as err:
        msg = "prompt exited"
        raise SelectionError(msg) from err

    answer = answer.strip()
    if answer.lower() == "all":
        return list(keys)

    chosen: list[Key] = []
    for token in answer.replace(",", " ").split():
        try:
            index = int(token)
        except ValueError as err:
            msg = f"not a key number: {token!r}"
            raise SelectionError(msg) from err
        if not 1 <= index <= len(keys):
            msg = f"key number {index} is out of range"
            raise SelectionError(msg)
        if keys[index - 1] not in chosen:
            chosen.append(keys[index - 1])

    if not chosen:
        msg = "no keys were selected"
        raise SelectionError(msg)
    return chosen
