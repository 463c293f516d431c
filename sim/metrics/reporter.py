"""CSV/JSON output for loop monitor data."""

import json
import csv
import io
from sim.metrics.collector import LoopMonitor


class Reporter:
    """Generates CSV and JSON reports from a LoopMonitor."""

    def __init__(self, monitor: LoopMonitor):
        self.monitor = monitor

    def to_csv(self) -> str:
        """Export cycle samples to CSV string."""
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(['time_ms', 'alpha', 'steps'])
        for s in self.monitor.samples:
            writer.writerow([s.time_ms, s.alpha, s.steps])
        return output.getvalue()

    def to_dict(self) -> dict:
        """Export samples and drops as lists of dicts."""
        return {
            'cycles': [
                {'time_ms': s.time_ms, 'alpha': s.alpha, 'steps': s.steps}
                for s in self.monitor.samples
            ],
            'drops': [
                {'time_ms': d.time_ms, 'overflow_ms': d.overflow_ms}
                for d in self.monitor.drops
            ],
        }

    def to_json(self) -> str:
        """Export samples, drops and summary to JSON string."""
        data = self.to_dict()
        data['summary'] = self.summary()
        return json.dumps(data, indent=2)

    def summary(self) -> dict:
        """Summary statistics for the monitored loop."""
        loop = self.monitor.loop
        samples = self.monitor.samples
        result = {
            'step_rate_hz': loop.step_rate_hz,
            'cycles': len(samples),
            'steps': self.monitor.total_steps,
            'drops': self.monitor.drop_count,
            'dropped_ms': self.monitor.total_dropped_ms,
        }
        if not samples:
            return result

        alphas = [s.alpha for s in samples]
        steps = [s.steps for s in samples]
        result.update({
            'min_alpha': min(alphas),
            'max_alpha': max(alphas),
            'avg_alpha': sum(alphas) / len(alphas),
            'max_steps_per_cycle': max(steps),
            'idle_cycles': sum(1 for n in steps if n == 0),
        })
        return result

    def write_csv(self, filepath: str):
        """Write CSV to file."""
        with open(filepath, 'w', newline='') as f:
            f.write(self.to_csv())

    def write_json(self, filepath: str):
        """Write JSON to file."""
        with open(filepath, 'w') as f:
            f.write(self.to_json())
