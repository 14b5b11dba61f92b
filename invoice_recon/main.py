import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from invoice_recon.config.settings import Settings
from invoice_recon.export.exceptions import ExportError
from invoice_recon.export.exporter import ExportFormat, build_exporter
from invoice_recon.logging.logger import Log
from invoice_recon.service.client_base import BaseJobServiceClient
from invoice_recon.service.exceptions import JobServiceError
from invoice_recon.service.factory import JobServiceClientFactory
from invoice_recon.service.models import JobSnapshot, JobStatus, LedgerFormat
from invoice_recon.tracking.tracker import JobTracker
from invoice_recon.uploads.exceptions import InvalidUploadError
from invoice_recon.uploads.file_loader import build_file_loader


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="invoice-recon",
        description="Submit invoice/delivery-note PDFs, track jobs and export reconciled tables.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    submit = sub.add_parser("submit", help="Upload PDFs as a new job")
    submit.add_argument("files", nargs="+", type=Path)
    submit.add_argument("--ledger", type=Path, help="CSV or XLSX ledger to update")
    submit.add_argument("--wait", action="store_true", help="Poll until the job finishes")

    status = sub.add_parser("status", help="Show the status of a job")
    status.add_argument("job_id")

    sub.add_parser("list", help="List all jobs")

    delete = sub.add_parser("delete", help="Delete a job")
    delete.add_argument("job_id")

    export = sub.add_parser("export", help="Export the reconciled table of a job")
    export.add_argument("job_id")
    export.add_argument("--format", choices=[f.value for f in ExportFormat], default="csv")

    ledger = sub.add_parser("ledger", help="Download the global ledger")
    ledger.add_argument("--format", choices=[f.value for f in LedgerFormat], default="csv")

    sub.add_parser("watch", help="Keep the job roster refreshed until interrupted")
    return parser


def _describe(job: JobSnapshot) -> str:
    line = f"{job.job_id}  {job.status.value:<10}  files={job.total_files}  created={job.created_at}"
    if job.ledger_file:
        line += f"  ledger={job.ledger_file}"
    if job.error:
        line += f"  error={job.error}"
    return line


async def _submit(args: argparse.Namespace, settings: Settings, tracker: JobTracker) -> int:
    loader = build_file_loader(settings)
    uploads = [loader.load_pdf(path) for path in args.files]
    ledger_file, ledger_format = (None, None)
    if args.ledger is not None:
        ledger_file, ledger_format = loader.load_ledger(args.ledger)

    if not args.wait:
        snapshot = await tracker.submit(
            uploads, ledger_file=ledger_file, ledger_format=ledger_format
        )
        print(_describe(snapshot))
        return 0

    async with tracker:
        snapshot = await tracker.submit(
            uploads, ledger_file=ledger_file, ledger_format=ledger_format
        )
        print(_describe(snapshot))
        final = await tracker.wait_for_terminal(snapshot.job_id)
        await tracker.wait_for_follow_ups()
    if final is None:
        return 1
    print(_describe(final))
    result = tracker.store.results.get(final.job_id)
    if result is not None:
        print(
            f"processed={result.successfully_processed} failed={result.failed_files}"
        )
    return 0 if final.status is JobStatus.COMPLETED else 1


async def _run(args: argparse.Namespace, settings: Settings, client: BaseJobServiceClient) -> int:
    tracker = JobTracker(client, settings)
    exporter = build_exporter(settings, client)

    if args.command == "submit":
        return await _submit(args, settings, tracker)
    if args.command == "status":
        snapshot = await tracker.poll(args.job_id)
        if snapshot is None:
            print(f"Status of {args.job_id} is unknown", file=sys.stderr)
            return 1
        print(_describe(snapshot))
        return 0
    if args.command == "list":
        for job in await tracker.list_all():
            print(_describe(job))
        return 0
    if args.command == "delete":
        print(await tracker.remove(args.job_id))
        return 0
    if args.command == "export":
        print(await exporter.export(args.job_id, ExportFormat(args.format)))
        return 0
    if args.command == "ledger":
        print(await exporter.save_global_ledger(LedgerFormat(args.format)))
        return 0
    if args.command == "watch":
        async with tracker:
            await asyncio.Event().wait()
    return 0


async def _main(args: argparse.Namespace, settings: Settings) -> int:
    client = JobServiceClientFactory.create(settings)
    try:
        return await _run(args, settings, client)
    finally:
        await client.aclose()


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: parse args -> load settings -> build client -> dispatch."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    try:
        return asyncio.run(_main(args, settings))
    except (JobServiceError, InvalidUploadError, ExportError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        Log.info("Shutting down")
        return 0


if __name__ == "__main__":
    sys.exit(main())
