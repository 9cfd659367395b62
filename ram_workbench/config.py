import os

from decouple import AutoConfig, Csv


class WorkbenchConfig:
    # Path where find settings.ini or .env file
    config = AutoConfig(search_path=os.getcwd())

    ## Logging
    WB_LOG_DIR = config('WB_LOG_DIR', default='./ram_inspection_logs')
    WB_LOG_PREFIX = config('WB_LOG_PREFIX', default='ram_inspection')
    WB_DEBUG = config('WB_DEBUG', default=False, cast=bool)
    WB_PAUSE = config('WB_PAUSE', default=True, cast=bool)

    ## Package installation
    WB_INSTALL = config('WB_INSTALL', default=True, cast=bool)
    WB_PACKAGES = config('WB_PACKAGES',
                         default='stress-ng,dmidecode,hwinfo,lshw,util-linux,mbw,sysbench',
                         cast=Csv())

    ## Stability test (stress-ng)
    # 2 workers is strong and safer than 4 on Live CDs
    WB_VM_WORKERS = config('WB_VM_WORKERS', default=2, cast=int)
    WB_VM_BYTES = config('WB_VM_BYTES', default='90%')
    WB_VERIFY_TIMEOUT = config('WB_VERIFY_TIMEOUT', default='5m')

    ## Throughput tests (mbw, sysbench)
    WB_MBW_SIZE_MB = config('WB_MBW_SIZE_MB', default=8000, cast=int)
    WB_MBW_RUNS = config('WB_MBW_RUNS', default=3, cast=int)
    WB_SYSBENCH_THREADS = config('WB_SYSBENCH_THREADS', default=4, cast=int)
    WB_SYSBENCH_TOTAL_SIZE = config('WB_SYSBENCH_TOTAL_SIZE', default='50G')

    ## What the kit under inspection should report
    WB_EXPECTED_RAM_GB = config('WB_EXPECTED_RAM_GB', default=64, cast=int)
    WB_EXPECTED_DIMMS = config('WB_EXPECTED_DIMMS', default=2, cast=int)
    WB_EXPECTED_SPEED_MTS = config('WB_EXPECTED_SPEED_MTS', default=6000, cast=int)
