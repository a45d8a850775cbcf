#!/usr/bin/env python3
"""
CLI for the device Log Service and network simulation
Runs the service, the simulation driver, or both together
"""

import argparse
import sys

import httpx
import uvicorn

from log_service.config import ServiceConfig
from log_service.main import create_app
from log_service.server import BackgroundServer, ServerStartError
from log_service.store import LogStore
from .config import SimulationConfig
from .driver import LOG, run_simulation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Device Log Service & network simulation')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    def add_service_args(p):
        p.add_argument('--host', help='Interface to listen on (default: DEVLOG_HOST or 0.0.0.0)')
        p.add_argument('--port', type=int, help='Port to listen on (default: DEVLOG_PORT or 8080)')
        p.add_argument('--log-file', help='Log file to append to (default: DEVLOG_FILE or server.log)')

    def add_client_args(p):
        p.add_argument('--url', help='Log Service URL (default: DEVLOG_URL or http://localhost:8080/)')
        p.add_argument('--timeout', type=float, help='Per-request timeout in seconds (default: 5)')

    run_parser = subparsers.add_parser('run', help='Start the service, run the simulation, keep serving')
    add_service_args(run_parser)
    add_client_args(run_parser)

    serve_parser = subparsers.add_parser('serve', help='Run only the Log Service')
    add_service_args(serve_parser)

    simulate_parser = subparsers.add_parser('simulate', help='Run only the simulation driver')
    add_client_args(simulate_parser)

    return parser


def service_config(args) -> ServiceConfig:
    config = ServiceConfig.from_env()
    if args.host:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.log_file:
        config.log_file = args.log_file
    return config


def simulation_config(args) -> SimulationConfig:
    config = SimulationConfig.from_env()
    if args.url:
        config.server_url = args.url
    if args.timeout is not None:
        config.request_timeout_s = args.timeout
    return config


def handle_serve_command(args):
    """Handle the serve command"""
    config = service_config(args)
    app = create_app(LogStore(config.log_file))
    uvicorn.run(app, host=config.host, port=config.port, log_level="info")


def handle_simulate_command(args):
    """Handle the simulate command"""
    config = simulation_config(args)
    with httpx.Client(timeout=config.request_timeout_s) as client:
        run_simulation(client, config.server_url)


def handle_run_command(args):
    """Handle the run command: service in the background, simulation in the foreground"""
    svc = service_config(args)
    sim = simulation_config(args)
    server = BackgroundServer(create_app(LogStore(svc.log_file)), host=svc.host, port=svc.port)
    try:
        server.start(timeout=svc.ready_timeout_s)
    except ServerStartError as e:
        LOG.error(f"❌ {e}")
        sys.exit(1)

    # Follow the bound port unless a URL was given explicitly
    url = args.url or f"http://localhost:{server.bound_port}/"
    try:
        with httpx.Client(timeout=sim.request_timeout_s) as client:
            run_simulation(client, url)

        print("\nServer keeps running. Press Enter to exit...")
        try:
            input()
        except EOFError:
            pass
    finally:
        server.stop()


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        args = parser.parse_args(['run'])

    if args.command == 'run':
        handle_run_command(args)
    elif args.command == 'serve':
        handle_serve_command(args)
    elif args.command == 'simulate':
        handle_simulate_command(args)
    else:
        parser.print_help()


if __name__ == '__main__':
    main()
