"""Resource usage of one process, chosen by id and/or name."""

import sys
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import psutil

from gazer_node.units.base import ItemValue, Unit

NAME_KEY = "0000_00_name_str"
PROCESS_NAME_KEY = "0102_00_process_name_str"
PROCESS_ID_KEY = "0102_01_process_id_int"

_MIN_ELAPSED = 0.0000001


@dataclass(frozen=True)
class ProcessInfo:
    """A running process as listed by the operating system."""

    name: str
    id: int
    info: str = ""


def get_processes() -> List[ProcessInfo]:
    """All processes whose id and name can be read."""
    result = []
    for proc in psutil.process_iter(["pid", "name"]):
        name = proc.info.get("name") or ""
        result.append(ProcessInfo(name=name, id=int(proc.info["pid"])))
    return result


def cpu_usage(delta_cpu_seconds: float, elapsed_seconds: float) -> float:
    """CPU time spent per unit of wall time (1.0 is one core fully busy); 0 for no elapsed time."""
    if elapsed_seconds <= _MIN_ELAPSED:
        return 0.0
    return delta_cpu_seconds / elapsed_seconds


class ProcessUnit(Unit):
    """Publishes CPU, memory and other counters of a watched process."""

    def __init__(self):
        super().__init__("unit102process")
        self.config.set_parameter_string(NAME_KEY, "Process")
        self.config.set_parameter_string(PROCESS_NAME_KEY, "explorer.exe")
        self.config.set_parameter_int(PROCESS_ID_KEY, 0)

        # Windows compares whole names ignoring case and takes the first match;
        # elsewhere a name matches by containment and the last match wins.
        self.exact_name_match = sys.platform == "win32"

        self.actual_process_id = -1
        self.actual_process_name = ""
        self.dt_operation_time = time.time()
        self._proc: Optional[psutil.Process] = None
        self._last_config: Tuple[int, str] = (0, "")

        self._last_cpu_valid = False
        self._last_cpu_value = 0.0
        self._last_cpu_time = time.monotonic()

        self._last_kernel_ms = 0
        self._last_user_ms = 0
        self._last_read_times = time.monotonic()

    def _criteria(self) -> Tuple[int, str]:
        process_id = self.config.get_parameter_int(PROCESS_ID_KEY, 0)
        process_name = self.config.get_parameter_string(PROCESS_NAME_KEY, "")
        return process_id, process_name

    def find_process(self, processes: Iterable[ProcessInfo]) -> Optional[ProcessInfo]:
        """The process among ``processes`` that matches the configured id and name."""
        process_id, process_name = self._criteria()
        id_active = process_id > 0
        name_active = process_name != ""
        if self.exact_name_match and not id_active and not name_active:
            return None

        found = None
        for info in processes:
            match_id = not id_active or info.id == process_id
            if not name_active:
                match_name = True
            elif self.exact_name_match:
                match_name = info.name.lower() == process_name.lower()
            else:
                match_name = process_name in info.name
            if match_id and match_name:
                if self.exact_name_match:
                    return info
                found = info
        return found

    def tick(self) -> None:
        criteria = self._criteria()
        if criteria != self._last_config:
            self.actual_process_id = -1
            self._last_config = criteria
        for item in self._collect():
            self.set_value(item.key, item.name, item.value, item.uom)

    def _collect(self) -> List[ItemValue]:
        if sys.platform == "darwin":
            return []
        if sys.platform == "win32":
            return self._collect_windows()
        return self._collect_posix()

    def _attach(self, info: ProcessInfo) -> bool:
        try:
            self._proc = psutil.Process(info.id)
        except psutil.Error:
            self._proc = None
            return False
        self.actual_process_id = info.id
        self.actual_process_name = info.name
        return True

    def _collect_posix(self) -> List[ItemValue]:
        items: List[ItemValue] = []

        if self.actual_process_id == -1:
            found = self.find_process(get_processes())
            if found is not None and self._attach(found):
                items.append(ItemValue("/Command", "Command", found.name, ""))
                try:
                    items.append(ItemValue("/Executable", "Executable", self._proc.exe(), ""))
                except psutil.Error:
                    pass
                items.append(ItemValue("/PID", "PID", str(found.id), ""))

        if self.actual_process_id == -1 or self._proc is None:
            items.append(ItemValue("/Status", "Status", "no process found", "error"))
            return items

        proc = self._proc
        try:
            with proc.oneshot():
                times = proc.cpu_times()
                memory = proc.memory_info()
                status = proc.status()
        except psutil.Error as err:
            items.append(ItemValue("/Status", "Status", str(err) or type(err).__name__, "error"))
            self._last_cpu_valid = False
            self.actual_process_id = -1
        else:
            now = time.monotonic()
            elapsed = now - self._last_cpu_time
            cpu_time = times.user + times.system
            if self._last_cpu_valid and elapsed > _MIN_ELAPSED:
                usage = cpu_usage(cpu_time - self._last_cpu_value, elapsed)
                items.append(ItemValue("/CPU", "CPU", f"{usage * 100:.2f}", "%"))
            self._last_cpu_time = now
            self._last_cpu_value = cpu_time
            self._last_cpu_valid = True

            items.append(ItemValue("/ResidentMemory", "Resident Memory", str(memory.rss // 1024), "KB"))
            items.append(ItemValue("/VirtualMemory", "Virtual Memory", str(memory.vms // 1024), "KB"))
            items.append(ItemValue("/Status", "Status", status, ""))

        try:
            fds = proc.num_fds()
        except (psutil.Error, AttributeError):
            items.append(ItemValue("/FileDescriptors", "File Descriptors", "", "error"))
            self.actual_process_id = -1
            self._last_cpu_valid = False
        else:
            items.append(ItemValue("/FileDescriptors", "File Descriptors", str(fds), ""))

        self.dt_operation_time = time.time()
        return items

    def _collect_windows(self) -> List[ItemValue]:
        items: List[ItemValue] = []
        just_found = False

        if self.actual_process_id < 0:
            process_id, process_name = self._criteria()
            if process_id <= 0 and process_name == "":
                return items
            found = self.find_process(get_processes())
            if found is not None:
                self.actual_process_id = found.id
                self.actual_process_name = found.name
                just_found = True

        if self.actual_process_id >= 0:
            try:
                proc = psutil.Process(self.actual_process_id)
                items.extend(self._windows_metrics(proc, just_found))
            except psutil.Error:
                self.actual_process_id = -1

        if self.actual_process_id < 0:
            items.append(ItemValue("/Status", "Error", "No process found", ""))
        else:
            items.append(ItemValue("/Status", "Error", "", ""))

        self.dt_operation_time = time.time()
        return items

    def _windows_metrics(self, proc: psutil.Process, just_found: bool) -> List[ItemValue]:
        items = [
            ItemValue("/Common/Name", "Name", self.actual_process_name, ""),
            ItemValue("/Common/ProcessID", "Process ID", str(self.actual_process_id), ""),
        ]

        memory = proc.memory_info()
        items.append(ItemValue("/Memory/WorkingSetSize", "Working Set Size",
                               str(getattr(memory, "wset", memory.rss) // 1024), "KB"))
        items.append(ItemValue("/Memory/PageFaults", "Page Faults",
                               str(getattr(memory, "num_page_faults", 0)), ""))
        items.append(ItemValue("/Memory/PeakWorkingSetSize", "Peak Working Set Size",
                               str(getattr(memory, "peak_wset", 0) // 1024), "KB"))
        items.append(ItemValue("/Memory/PrivateUsage", "Private Usage",
                               str(getattr(memory, "private", 0) // 1024), "KB"))

        items.append(ItemValue("/Main/ThreadCount", "Thread Count", str(proc.num_threads()), ""))
        items.append(ItemValue("/Main/HandleCount", "Handle Count", str(proc.num_handles()), ""))

        times = proc.cpu_times()
        kernel_ms = int(times.system * 1000)
        user_ms = int(times.user * 1000)
        delta_kernel = kernel_ms - self._last_kernel_ms
        delta_user = user_ms - self._last_user_ms
        now = time.monotonic()
        during_ms = int((now - self._last_read_times) * 1000)

        usage_kernel = cpu_usage(delta_kernel, during_ms)
        usage_user = cpu_usage(delta_user, during_ms)
        usage = cpu_usage(delta_kernel + delta_user, during_ms)

        self._last_read_times = now
        self._last_kernel_ms = kernel_ms
        self._last_user_ms = user_ms

        if just_found:
            usage_kernel = usage_user = usage = 0.0

        items.append(ItemValue("/CPU/KernelModeTime", "Kernel Mode Time", str(kernel_ms), "ms"))
        items.append(ItemValue("/CPU/UserModeTime", "User Mode Time", str(user_ms), "ms"))
        items.append(ItemValue("/CPU/Usage", "CPU Usage", f"{usage * 100:.2f}", "%"))
        items.append(ItemValue("/", "CPU Usage", f"{usage * 100:.2f}", "%"))
        items.append(ItemValue("/CPU/UsageKernel", "CPU Usage Kernel", f"{usage_kernel * 100:.2f}", "%"))
        items.append(ItemValue("/CPU/UsageUser", "CPU Usage User", f"{usage_user * 100:.2f}", "%"))

        io = proc.io_counters()
        items.append(ItemValue("/IO/ReadOperationCount", "Read Operation Count", str(io.read_count), ""))
        items.append(ItemValue("/IO/ReadTransferCount", "Read Transfer Count", str(io.read_bytes), ""))
        items.append(ItemValue("/IO/WriteOperationCount", "Write Operation Count", str(io.write_count), ""))
        items.append(ItemValue("/IO/WriteTransferCount", "Write Transfer Count", str(io.write_bytes), ""))
        items.append(ItemValue("/IO/OtherOperationCount", "Other Operation Count",
                               str(getattr(io, "other_count", 0)), ""))
        items.append(ItemValue("/IO/OtherTransferCount", "Other Transfer Count",
                               str(getattr(io, "other_bytes", 0)), ""))
        return items