# sisop

Four cooperating processes (a kernel, a CPU, a memory and an I/O device)
that connect to one another over TCP and exchange messages in a simple
binary protocol.

## Installing

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## The processes

| Command         | Role                                                                         |
|-----------------|------------------------------------------------------------------------------|
| `sisop-memoria` | Listens on `PUERTO_ESCUCHA`, accepts the kernel and then the CPU.             |
| `sisop-kernel`  | Connects to memory, then listens for CPU dispatch, CPU interrupt and I/O.     |
| `sisop-cpu`     | Connects to memory and to the kernel's dispatch and interrupt ports.         |
| `sisop-io`      | Connects to the kernel's I/O port.                                           |

Each command takes one optional argument, the path of its configuration
file. Without it the file is looked for in the current directory as
`memoria.config`, `kernel.config`, `cpu.config` or `io.config`. Each process
prints a greeting, logs to the console and to `memoria.log`, `kernel.log`,
`cpu.log` or `io.log` in the current directory, logs its configuration,
and logs every connection it makes or accepts.

Start them in this order: memory first, then the kernel, then the CPU and
the I/O device. Every process then serves each peer on its own thread and
exits when its main peer disconnects: the CPU when the kernel's interrupt
channel closes, the kernel when the CPU dispatch channel closes, the memory
when the CPU leaves, and the I/O device when the kernel leaves. A command
returns exit status 1 if its configuration cannot be read or a connection
fails.

## Configuration

Each process reads a plain `KEY=VALUE` file. Blank lines and lines starting
with `#` are ignored; any other line without `=` is an error. Missing keys
and values that are not numbers where numbers are expected are errors too.

Memory:

```
PUERTO_ESCUCHA=8002
TAM_MEMORIA=4096
TAM_PAGINA=64
ENTRADAS_POR_TABLA=4
CANTIDAD_NIVELES=3
RETARDO_MEMORIA=1500
PATH_SWAPFILE=/tmp/swapfile.bin
RETARDO_SWAP=15000
DUMP_PATH=/tmp/dump_files/
```

Kernel:

```
IP_MEMORIA=127.0.0.1
PUERTO_MEMORIA=8002
PUERTO_ESCUCHA_DISPATCH=8001
PUERTO_ESCUCHA_INTERRUPT=8004
PUERTO_ESCUCHA_IO=8003
ALGORITMO_CORTO_PLAZO=FIFO
ALGORITMO_INGRESO_A_READY=PMCP
ALFA=0.5
TIEMPO_SUSPENSION=4500
LOG_LEVEL=TRACE
```

CPU:

```
IP_MEMORIA=127.0.0.1
PUERTO_MEMORIA=8002
IP_KERNEL=127.0.0.1
PUERTO_KERNEL_DISPATCH=8001
PUERTO_KERNEL_INTERRUPT=8004
ENTRADAS_TLB=4
REEMPLAZO_TLB=LRU
ENTRADAS_CACHE=2
REEMPLAZO_CACHE=CLOCK
RETARDO_CACHE=250
LOG_LEVEL=TRACE
```

I/O:

```
IP_KERNEL=127.0.0.1
PUERTO_KERNEL=8003
LOG_LEVEL=TRACE
```

The settings are loaded into `MemoriaSettings`, `KernelSettings`,
`CpuSettings` and `IoSettings` (each with `from_config` and `log`).

## The protocol

Every message on the wire is a packet:

```
[op code : int][buffer size : int][buffer stream]
```

Integers are 32-bit little-endian. The buffer stream is a sequence of
fields, each written as its length followed by its bytes. Integers travel
as four-byte fields and strings carry their terminating NUL byte.

The `sisop.protocol` module provides the pieces for building and reading
packets:

- `OpCode`: the operation codes `MESSAGE`, `PACKET`, `HANDSHAKE`,
  `HANDSHAKE_REPLY` and `CREATE_PROCESS`.
- `Buffer`: fields are appended with `add_int`, `add_uint32`, `add_string`
  and `add_bytes`, and taken back in the same order with `extract_int`,
  `extract_uint32`, `extract_string` and `extract_bytes`.
- `Packet`: an op code with its buffer; `serialize()` gives the bytes to
  send.
- `send_packet`, `receive_operation` and `receive_buffer` move packets over
  a socket. `receive_operation` closes the socket and returns `None` when
  the peer has gone away.
- `ProtocolError` is raised for malformed or truncated data.

The `sisop.net` module holds the connection helpers: `greet`,
`create_connection`, `start_server` and `wait_client`. `sisop.config` reads
configuration files (`Config`, `parse_config`, `ConfigError`) and sets up
logging (`create_logger`). `sisop.listener.attend` runs the receive loop
that serves one peer: it passes operation codes to the handlers it is
given, ignores plain messages and packets, and logs any other code as
unknown.

## What it does not do

The processes connect and exchange packets, and no more. The memory
answers `CREATE_PROCESS` by reading its payload (`[int pid][string path][int
size]`) and logging it; every other operation is ignored or logged as
unknown. There is no process scheduling in the kernel, no instruction
execution, TLB or cache in the CPU, no paging, swap file or dumps in the
memory, and no I/O work in the I/O device. The settings for these are read
and logged but not used, and `LOG_LEVEL` does not change the logging level,
which is always INFO.