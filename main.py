"""
fb2sqlite 入口：获取 GS1 firstbase CSV，可选地按 MiGeL 参考目录匹配，写入 SQLite，可选 scp 部署。

流程拆分为：init_config -> load_source -> (可选) load_reference -> run_export -> (可选) deploy，
便于单测与维护；支持命令行参数 --migel、--local-csv、--local-catalog、--deploy、--workers、--config。
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path

from app import SqliteSink, deploy_file, download_file, download_text, read_local_text, read_table, run_pipeline
from core import ReferenceCatalog, build_index, load_catalog
from core.config import get_data_dir, get_log_dir, get_output_dir, load_app_config
from domain.errors import Fb2SqliteError, PipelineAbort
from models.schemas import AppConfigSchema, PipelineResult, RunConfigSchema

logger = logging.getLogger(__name__)


def init_config(
    *,
    config_path: Path | None = None,
    data_dir: Path | None = None,
    output_dir: Path | None = None,
    log_dir: Path | None = None,
) -> tuple[AppConfigSchema, RunConfigSchema]:
    """
    初始化配置与日志：加载 app_config.yaml、配置 logging，返回 (应用配置, 运行时路径)。

    Args:
        config_path: 配置文件路径，默认 config/app_config.yaml。
        data_dir: CSV 与工作簿缓存目录，默认 core.config.get_data_dir()。
        output_dir: 数据库输出目录，默认 core.config.get_output_dir()。
        log_dir: 日志目录，默认 core.config.get_log_dir()。
    """
    app_cfg = load_app_config(config_path)
    run_cfg = RunConfigSchema(
        data_dir=data_dir or get_data_dir(),
        output_dir=output_dir or get_output_dir(),
        log_dir=log_dir or get_log_dir(),
        csv_filename=app_cfg.source.csv_filename,
        catalog_filename=app_cfg.catalog.filename,
    )
    _setup_logging(run_cfg.log_dir, prefix=app_cfg.app.log_file_prefix, level=app_cfg.app.log_level)
    return app_cfg, run_cfg


def _setup_logging(log_dir: Path, *, prefix: str = "fb2sqlite", level: str = "INFO") -> None:
    """
    将日志按日期写入 log_dir，文件名 <prefix>_YYYYMMDD.log。
    若已存在指向当日日志文件的 FileHandler 则不再添加，避免重复。
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    today = datetime.now().strftime("%Y%m%d")
    log_file = log_dir / f"{prefix}_{today}.log"
    log_path = str(log_file.resolve())
    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", "") == log_path:
            return
    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)


def load_source(app_cfg: AppConfigSchema, run_cfg: RunConfigSchema, *, local: bool) -> str:
    """取得 CSV 文本：local 为 True 时读本地缓存，否则下载并覆盖缓存。"""
    if local:
        print(f"读取本地 CSV: {run_cfg.csv_path}")
        return read_local_text(run_cfg.csv_path)
    print(f"下载 CSV 到 {run_cfg.csv_path} ...")
    return download_text(
        app_cfg.source.url,
        run_cfg.csv_path,
        timeout=app_cfg.source.timeout_seconds,
        user_agent=app_cfg.app.user_agent,
    )


def load_reference(app_cfg: AppConfigSchema, run_cfg: RunConfigSchema, *, local: bool) -> ReferenceCatalog:
    """取得 MiGeL 工作簿（下载或本地缓存），解析条目并构建倒排索引。"""
    if not local:
        print("下载 MiGeL 工作簿 ...")
        size = download_file(
            app_cfg.catalog.url,
            run_cfg.catalog_path,
            timeout=app_cfg.source.timeout_seconds,
            user_agent=app_cfg.app.user_agent,
        )
        print(f"MiGeL 工作簿已保存（{size} 字节）")
    items = load_catalog(run_cfg.catalog_path, app_cfg.catalog)
    print(f"MiGeL 条目 {len(items)} 个")
    index = build_index(items)
    print(f"关键词索引 {len(index)} 个关键词")
    return ReferenceCatalog(items=items, index=index)


def run_export(
    content: str,
    db_path: Path,
    app_cfg: AppConfigSchema,
    *,
    catalog: ReferenceCatalog | None = None,
) -> PipelineResult:
    """解析 CSV 并经流水线写入 db_path；catalog 非空时只写入匹配成功的行。"""
    sink = SqliteSink(db_path, table=app_cfg.sink.table)
    return run_pipeline(
        read_table(content, app_cfg.source.max_fields),
        sink,
        catalog=catalog,
        matching=app_cfg.matching,
        queue_size=app_cfg.sink.queue_size,
    )


def _parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """解析命令行参数；args 为 None 时使用 sys.argv，便于单测注入。"""
    parser = argparse.ArgumentParser(
        prog="fb2sqlite",
        description="GS1 firstbase CSV 转 SQLite，可选按 MiGeL 目录匹配位置号与限制。",
    )
    parser.add_argument("--migel", action="store_true", help="下载 MiGeL 工作簿并为产品匹配位置号/描述/限制")
    parser.add_argument("--local-csv", action="store_true", help="使用本地 firstbase.csv，不下载")
    parser.add_argument("--local-catalog", action="store_true", help="使用本地 migel.xlsx，不下载")
    parser.add_argument("--deploy", action="store_true", help="完成后 scp 数据库到远端（匹配模式使用不带日期的文件名）")
    parser.add_argument("--workers", type=int, default=None, help="匹配并行进程数，0 为 CPU 核数")
    parser.add_argument("--config", type=Path, default=None, help="配置文件路径，默认 config/app_config.yaml")
    return parser.parse_args(args)


def main(args: list[str] | None = None, *, today: date | None = None) -> None:
    """
    入口：初始化配置 -> 获取 CSV ->（--migel）加载参考目录 -> 写库 ->（--deploy）部署。
    任一阶段失败时打印失败阶段并以状态码 1 退出。
    """
    parsed = _parse_args(args)
    app_cfg, run_cfg = init_config(config_path=parsed.config)
    if parsed.workers is not None:
        app_cfg = app_cfg.model_copy(
            update={"matching": app_cfg.matching.model_copy(update={"workers": max(parsed.workers, 0)})}
        )

    db_name = app_cfg.sink.db_filename(enrich=parsed.migel, deploy=parsed.deploy, today=today)
    db_path = run_cfg.output_dir / db_name
    stage = "source"
    try:
        content = load_source(app_cfg, run_cfg, local=parsed.local_csv)
        catalog = None
        if parsed.migel:
            stage = "catalog"
            catalog = load_reference(app_cfg, run_cfg, local=parsed.local_catalog)
        stage = "pipeline"
        result = run_export(content, db_path, app_cfg, catalog=catalog)
        print(f"数据库 {db_path} 创建成功。")
        if result.enriched:
            print(f"数据行 {result.total_rows}，MiGeL 匹配 {result.matched_rows}")
        else:
            print(f"处理数据行 {result.total_rows}")
        if parsed.deploy:
            stage = "deploy"
            print(f"传输 {db_path} 到 {app_cfg.deploy.remote_dest} ...")
            deploy_file(db_path, app_cfg.deploy.remote_dest, scp_command=app_cfg.deploy.scp_command)
            print("scp 传输完成。")
    except PipelineAbort as e:
        logger.exception("流水线失败")
        print(f"失败阶段 {e.stage}: {e.cause}")
        sys.exit(1)
    except Fb2SqliteError as e:
        logger.exception("%s 阶段失败", stage)
        print(f"失败阶段 {stage}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
