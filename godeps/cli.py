"""godeps 命令行接口"""

from __future__ import annotations

import json

import click

from godeps import __version__
from godeps.core.config import Config, init_config
from godeps.core.exceptions import CancelledError, GoDepsError, InitializationError
from godeps.core.resolver import GolangResolver, ScanReport
from godeps.utils.logger import setup_logging
from godeps.utils.yaml_io import dump_yaml, save_yaml


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default="configs/godeps.yml", help="配置文件路径")
@click.option("--log-level", default=None, help="日志级别（覆盖配置文件）")
@click.option("--json-log", is_flag=True, help="输出 JSON 格式日志")
@click.pass_context
def main(ctx: click.Context, config_path: str, log_level: str | None, json_log: bool) -> None:
    """godeps - Go 模块依赖解析"""
    try:
        cfg = init_config(config_path)
    except GoDepsError as e:
        raise click.ClickException(str(e)) from e
    setup_logging(log_level or cfg.log_level, json_output=json_log or cfg.json_log)
    ctx.obj = cfg


def _apply_overrides(cfg: Config, go: str | None, timeout: int | None) -> Config:
    if go:
        cfg.go_path = go
    if timeout:
        cfg.timeout = timeout
    return cfg


def _render(report: ScanReport, fmt: str) -> str:
    rows = [r.to_dict() for r in report.records]
    if fmt == "json":
        return json.dumps(rows, ensure_ascii=False, indent=2)
    if fmt == "yaml":
        return dump_yaml(rows)
    lines = []
    for r in report.records:
        lines.append(f"  {r.display_name:50s} {r.identifier.value}")
    return "\n".join(lines)


@main.command()
@click.argument("manifests", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--go", default=None, help="go 可执行文件路径")
@click.option("--timeout", default=None, type=int, help="go 进程超时时间（秒）")
@click.option("--format", "-f", "fmt", default="text", type=click.Choice(["text", "json", "yaml"]))
@click.option("--output", "-o", default=None, help="写入文件（yaml 格式）")
@click.option("--no-probe", is_flag=True, help="跳过 go 能力探测")
@click.pass_obj
def resolve(
    cfg: Config, manifests: tuple[str, ...], go: str | None, timeout: int | None,
    fmt: str, output: str | None, no_probe: bool,
) -> None:
    """解析 Gopkg.lock / go.mod 清单中的依赖"""
    cfg = _apply_overrides(cfg, go, timeout)
    if no_probe:
        cfg.probe_enabled = False

    try:
        report = GolangResolver(cfg).analyze_all(manifests)
    except CancelledError as e:
        raise click.Abort() from e

    if report.disabled_reason:
        click.echo(f"go 不可用，已跳过 go.mod: {report.disabled_reason}", err=True)
    for path in report.skipped:
        click.echo(f"  [SKIPPED] {path}", err=True)
    for path, msg in report.errors.items():
        click.echo(f"  [FAILED] {path}: {msg}", err=True)

    if output:
        save_yaml(output, [r.to_dict() for r in report.records])
        click.echo(f"已写入 {len(report.records)} 个依赖: {output}")
    elif report.records:
        click.echo(_render(report, fmt))
    else:
        click.echo("没有解析到依赖。")

    if not report.success:
        raise SystemExit(1)


@main.command()
@click.option("--go", default=None, help="go 可执行文件路径")
@click.option("--timeout", default=None, type=int, help="go 进程超时时间（秒）")
@click.pass_obj
def probe(cfg: Config, go: str | None, timeout: int | None) -> None:
    """检测 go 工具链是否可用"""
    cfg = _apply_overrides(cfg, go, timeout)
    cfg.probe_enabled = True
    resolver = GolangResolver(cfg)
    try:
        resolver.prepare()
    except InitializationError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"go 可用: {resolver.toolchain.go}")
