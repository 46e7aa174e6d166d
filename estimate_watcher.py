#!/usr/bin/env python3
"""
Estimate Folder Watcher - Automatic Processing

Watches a folder for new estimate PDFs and uploads them to the estimate
analyzer API. Parsed estimates are moved to the processed folder; estimates
needing review, and files the API could not read, go to the review folder.

Usage:
    python estimate_watcher.py --watch-folder ./estimates-incoming
"""

import argparse
import time
import requests
from pathlib import Path
from datetime import datetime
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
import json

# Configuration
API_BASE_URL = "http://127.0.0.1:8000"

class EstimateHandler(FileSystemEventHandler):
    """Handles new estimate file events"""

    def __init__(self, watch_folder, processed_folder, review_folder, api_base_url=API_BASE_URL):
        self.watch_folder = Path(watch_folder)
        self.processed_folder = Path(processed_folder)
        self.review_folder = Path(review_folder)
        self.api_base_url = api_base_url
        self.processed_files = set()

        # Create folders if they don't exist
        self.processed_folder.mkdir(exist_ok=True)
        self.review_folder.mkdir(exist_ok=True)

    def on_created(self, event):
        """Called when a file is created in the watched folder"""
        if event.is_directory:
            return

        file_path = Path(event.src_path)

        # Only process PDF files
        if file_path.suffix.lower() != '.pdf':
            return

        # Avoid processing the same file multiple times
        if file_path in self.processed_files:
            return

        # Small delay to ensure file is fully written
        time.sleep(1)

        # Check if file still exists (might have been moved)
        if not file_path.exists():
            return

        self.processed_files.add(file_path)
        self.process_estimate(file_path)

    def process_estimate(self, file_path: Path):
        """Upload an estimate PDF to the API"""
        print("\n" + "="*70)
        print(f"NEW ESTIMATE: {file_path.name}")
        print(f"Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print(f"Size: {file_path.stat().st_size:,} bytes")

        try:
            with open(file_path, 'rb') as f:
                files = {'file': (file_path.name, f, 'application/pdf')}
                response = requests.post(
                    f"{self.api_base_url}/estimates/upload",
                    files=files,
                    timeout=120
                )

            if response.status_code == 200:
                self.handle_success(file_path, response.json())
            else:
                print(f"API Error: {response.status_code}")
                print(f"   {response.text}")
                self.handle_error(file_path, f"API returned {response.status_code}")

        except requests.exceptions.Timeout:
            self.handle_error(file_path, "Timeout")
        except requests.exceptions.RequestException as e:
            self.handle_error(file_path, str(e))

    def handle_success(self, file_path: Path, data: dict):
        """Move the file according to the stored estimate's status"""
        estimate = data['estimate']
        totals = estimate.get('totals', {})

        print(f"   Customer: {estimate.get('customer_name') or '-'}")
        print(f"   Claim #: {estimate.get('claim_number') or '-'}")
        print(f"   Insurance: {estimate.get('insurance_company') or '-'}")
        print(f"   Insurance Pay: {totals.get('insurance_pay', 0):,.2f}")
        print(f"   Confidence: {data['parse_confidence']:.0%}")

        if data['status'] == 'parsed':
            print("RESULT: PARSED")
            destination = self.processed_folder
        else:
            print("RESULT: NEEDS REVIEW")
            destination = self.review_folder

        dest_path = destination / file_path.name
        file_path.rename(dest_path)
        print(f"Moved to: {dest_path}")

        self.log_processing(file_path.name, data, dest_path)
        print("="*70)

    def handle_error(self, file_path: Path, error_msg: str):
        """Move unreadable files to the review folder for re-upload"""
        print(f"Processing failed: {error_msg}")

        dest_path = self.review_folder / f"ERROR_{file_path.name}"
        file_path.rename(dest_path)
        print(f"Moved to: {dest_path}")
        print("="*70)

    def log_processing(self, filename: str, data: dict, dest_path: Path):
        """Log processing results to JSON file"""
        log_file = self.watch_folder.parent / "processing_log.json"

        if log_file.exists():
            with open(log_file, 'r') as f:
                log_data = json.load(f)
        else:
            log_data = []

        log_data.append({
            "timestamp": datetime.now().isoformat(),
            "filename": filename,
            "estimate_id": data['estimate_id'],
            "status": data['status'],
            "parse_confidence": data['parse_confidence'],
            "destination": str(dest_path)
        })

        with open(log_file, 'w') as f:
            json.dump(log_data, f, indent=2)


def main():
    parser = argparse.ArgumentParser(
        description='Watch a folder for estimate PDFs and process them automatically'
    )
    parser.add_argument(
        '--watch-folder',
        default='./estimates-incoming',
        help='Folder to watch for new estimates (default: ./estimates-incoming)'
    )
    parser.add_argument(
        '--processed-folder',
        default='./estimates-processed',
        help='Folder for parsed estimates (default: ./estimates-processed)'
    )
    parser.add_argument(
        '--review-folder',
        default='./estimates-review',
        help='Folder for estimates needing review (default: ./estimates-review)'
    )
    parser.add_argument(
        '--api-url',
        default=API_BASE_URL,
        help=f'API base URL (default: {API_BASE_URL})'
    )

    args = parser.parse_args()

    watch_folder = Path(args.watch_folder)
    watch_folder.mkdir(exist_ok=True)

    event_handler = EstimateHandler(
        args.watch_folder,
        args.processed_folder,
        args.review_folder,
        api_base_url=args.api_url
    )
    observer = Observer()
    observer.schedule(event_handler, str(watch_folder), recursive=False)
    observer.start()

    print("="*70)
    print("ESTIMATE WATCHER")
    print("="*70)
    print(f"Watching: {watch_folder.absolute()}")
    print(f"Parsed → {Path(args.processed_folder).absolute()}")
    print(f"Needs Review → {Path(args.review_folder).absolute()}")
    print(f"API: {args.api_url}")
    print("Press Ctrl+C to stop")
    print("="*70)

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nStopping watcher...")
        observer.stop()

    observer.join()
    print("Watcher stopped")


if __name__ == "__main__":
    main()
