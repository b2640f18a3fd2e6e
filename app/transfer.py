"""外部传输：HTTP 下载 CSV / 工作簿，scp 部署数据库文件。不做重试与断点续传。"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

import httpx

from domain.errors import TransferError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "fb2sqlite/0.1"


def _http_client(timeout: float, user_agent: str) -> httpx.Client:
    return httpx.Client(
        headers={"User-Agent": user_agent},
        follow_redirects=True,
        timeout=httpx.Timeout(timeout),
    )


def _get(url: str, timeout: float, user_agent: str) -> httpx.Response:
    try:
        with _http_client(timeout, user_agent) as client:
            response = client.get(url)
    except httpx.HTTPError as e:
        raise TransferError(f"下载失败 {url}: {e}") from e
    if response.status_code >= 400:
        raise TransferError(f"下载失败 {url}: HTTP {response.status_code}")
    return response


def download_text(
    url: str,
    dest: Path,
    *,
    timeout: float = 300.0,
    user_agent: str = DEFAULT_USER_AGENT,
) -> str:
    """下载文本（CSV），保存到 dest 并返回内容。"""
    response = _get(url, timeout, user_agent)
    content = response.text
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(content, encoding="utf-8")
    logger.info("已下载 %s -> %s（%d 字符）", url, dest, len(content))
    return content


def download_file(
    url: str,
    dest: Path,
    *,
    timeout: float = 300.0,
    user_agent: str = DEFAULT_USER_AGENT,
) -> int:
    """下载二进制文件（xlsx）到 dest，返回字节数。"""
    response = _get(url, timeout, user_agent)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(response.content)
    logger.info("已下载 %s -> %s（%d 字节）", url, dest, len(response.content))
    return len(response.content)


def deploy_file(path: Path, remote_dest: str, *, scp_command: str = "scp") -> None:
    """scp 传输到远端；未配置目标或退出码非 0 时抛出 TransferError。"""
    if not remote_dest:
        raise TransferError("未配置部署目标 deploy.remote_dest")
    logger.info("scp %s -> %s", path, remote_dest)
    try:
        completed = subprocess.run([scp_command, str(path), remote_dest], check=False)
    except OSError as e:
        raise TransferError(f"无法执行 {scp_command}: {e}") from e
    if completed.returncode != 0:
        raise TransferError(f"scp 失败，退出码 {completed.returncode}")
