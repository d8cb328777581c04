"""
Command-line interface for sshare.
"""

from __future__ import annotations

import logging

import click

from sshare.common import Config, setup_logger
from sshare.common.exceptions import SshareError
from sshare.common.interfaces import DeletableStore, RemoteStore
from sshare.common.models import UploadConfig
from sshare.github import GitHubKeys
from sshare.keys.sources import KeySources
from sshare.stores.pastebin import ExpiryTime, Pastebin, Visibility
from sshare.stores.transfer import TransferSh
from sshare.ui import output
from sshare.ui.prompt import select_keys

config = Config()


def _parse_expiry(
    ctx: click.Context, param: click.Parameter, value: str
) -> ExpiryTime:
    expiry = ExpiryTime.parse(value)
    if expiry is ExpiryTime.INVALID:
        msg = f"{value!r} is not a valid paste expiry"
        raise click.BadParameter(msg, ctx=ctx, param=param)
    return expiry


def _parse_visibility(
    ctx: click.Context, param: click.Parameter, value: str
) -> Visibility:
    visibility = Visibility.parse(value)
    if visibility is Visibility.INVALID:
        msg = f"{value!r} is not a valid paste visibility"
        raise click.BadParameter(msg, ctx=ctx, param=param)
    return visibility


@click.group(invoke_without_command=True)
@click.option(
    "--agent",
    "-a",
    "agent_path",
    default=config.SSH_AUTH_SOCK,
    help="Path to the target ssh agent socket ($SSH_AUTH_SOCK)",
)
@click.option("--passphrase", "-p", default="", help="Passphrase for the ssh agent")
@click.option(
    "--github-token",
    "-g",
    default="",
    help="GitHub token with permission to read ssh keys",
)
@click.option(
    "--key-file",
    "-f",
    "key_files",
    multiple=True,
    help="Additional key file(s) to include in the generated authorized_keys",
)
@click.option(
    "--key",
    "-k",
    "raw_keys",
    multiple=True,
    help="Additional keys to include in the generated authorized_keys",
)
@click.option(
    "--url",
    default=config.TRANSFER_URL,
    help="URL of the target transfer.sh instance",
)
@click.option(
    "--max-downloads",
    "-m",
    type=click.IntRange(min=1),
    default=config.DEFAULT_MAX_DOWNLOADS,
    help="Maximum number of times the shared content can be downloaded",
)
@click.option(
    "--max-days",
    "-d",
    type=click.IntRange(min=1),
    default=config.DEFAULT_MAX_DAYS,
    help="Number of days the content remains available via transfer.sh",
)
@click.option(
    "--encrypt", "-e", default="", help="Password for transfer.sh server-side encryption"
)
@click.option("--pastebin", is_flag=True, help="Share via Pastebin instead of transfer.sh")
@click.option(
    "--expiry",
    default=config.DEFAULT_EXPIRY,
    callback=_parse_expiry,
    help="Paste expiry (N, 10M, 1H, 1D, 1W, 2W, 1M, 6M, 1Y or e.g. day, week)",
)
@click.option(
    "--visibility",
    default=config.DEFAULT_VISIBILITY,
    callback=_parse_visibility,
    help="Paste visibility (public, unlisted, private)",
)
@click.option(
    "--pastebin-token",
    default=config.PASTEBIN_DEV_TOKEN,
    help="Pastebin developer token ($SSHARE_PASTEBIN_TOKEN)",
)
@click.option("--pastebin-user-key", default="", help="Pastebin user key")
@click.option("--pastebin-folder", default="", help="Pastebin folder key")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(  # noqa: PLR0913
    ctx: click.Context,
    agent_path: str,
    passphrase: str,
    github_token: str,
    key_files: tuple[str, ...],
    raw_keys: tuple[str, ...],
    url: str,
    max_downloads: int,
    max_days: int,
    encrypt: str,
    pastebin: bool,  # noqa: FBT001
    expiry: ExpiryTime,
    visibility: Visibility,
    pastebin_token: str,
    pastebin_user_key: str,
    pastebin_folder: str,
    verbose: bool,  # noqa: FBT001
) -> None:
    """Easily share links to your SSH public keys"""
    setup_logger(
        logging.getLogger("sshare"), logging.DEBUG if verbose else config.LOG_LEVEL
    )
    if ctx.invoked_subcommand is not None:
        return

    try:
        if pastebin:
            store: RemoteStore = Pastebin.create(
                pastebin_token,
                user_key=pastebin_user_key,
                folder_key=pastebin_folder,
                expiry=expiry,
                visibility=visibility,
            )
        else:
            upload_config = (
                UploadConfig()
                .with_filename(config.DEFAULT_FILENAME)
                .with_max_downloads(max_downloads)
                .with_max_days(max_days)
                .with_password(encrypt)
            )
            store = TransferSh(base_url=url, upload_config=upload_config)

        sources = KeySources()
        if key_files:
            output.info("Adding keys from files...")
            sources.add_files(key_files)
        if raw_keys:
            output.info("Adding keys from raw values...")
            sources.add_raw(raw_keys)
        if github_token:
            output.info("Adding keys from GitHub...")
            sources.add_github(GitHubKeys(github_token), select_keys)
        if agent_path:
            output.info("Adding keys from SSH agent...")
            sources.add_agent(agent_path, select_keys, passphrase=passphrase)
        else:
            output.warn("No SSH agent path has been provided. Skipping...")
        for warning in sources.warnings:
            output.warn(warning)

        if not sources.keys:
            msg = "No keys were selected"
            raise click.ClickException(msg)

        key_text = sources.render()
        output.info(f"Generated authorized_keys:\n{key_text}")
        published = store.publish(key_text)
    except SshareError as err:
        raise click.ClickException(err.message) from err
    except OSError as err:
        raise click.ClickException(str(err)) from err

    if published.delete_credential:
        output.success(f"File Download URL: {published.locator}")
        output.info(f"File Delete Token: {published.delete_credential}")
    else:
        output.success(f"Paste URL: {published.locator}")
        output.info(f"Raw Paste URL: {published.raw_locator}")


@cli.command()
@click.argument("file_url")
@click.argument("delete_token")
@click.pass_context
def delete(ctx: click.Context, file_url: str, delete_token: str) -> None:
    """Delete an uploaded authorized_keys file"""
    try:
        store: DeletableStore = TransferSh(base_url=ctx.parent.params["url"])
        store.delete(file_url, delete_token)
    except SshareError as err:
        msg = f"Failed to delete file: {err.message}"
        raise click.ClickException(msg) from err
    output.success("File Deleted")


@cli.command("pastebin-login")
@click.option("--username", prompt=True, help="Pastebin account name")
@click.option(
    "--password", prompt=True, hide_input=True, help="Pastebin account password"
)
@click.option(
    "--pastebin-token",
    default=config.PASTEBIN_DEV_TOKEN,
    help="Pastebin developer token ($SSHARE_PASTEBIN_TOKEN)",
)
def pastebin_login(username: str, password: str, pastebin_token: str) -> None:
    """Generate a reusable Pastebin user key"""
    try:
        user_key = Pastebin.create(pastebin_token).generate_user_key(
            username, password
        )
    except SshareError as err:
        raise click.ClickException(err.message) from err
    output.success(f"Pastebin user key: {user_key}")


if __name__ == "__main__":
    cli()
