# sigscan

A small signature-based file scanner. A scan server loads a database of byte
signatures and serves scan requests from many connections at once on a pool of
threads; a client walks a directory tree, sends the path of every candidate
file to the server and writes a report of the files that did not come back as
`Normal`.

Server and client talk over TCP with length-prefixed messages. Paths and
verdicts travel as UTF-16-LE text.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The signature database

The database is a plain text file named `Signatures.txt`, one signature per
line:

```
<hex bytes>.{<GUID>}
```

for example

```
4D5A90.{00000000-0000-0000-0000-000000000001}
```

The hex part is the byte sequence to look for (an odd number of digits is
padded with a leading zero); the GUID in braces names the signature. A line
must consist of exactly this and nothing else, otherwise it is ignored. If the
same byte sequence appears more than once, the first line wins.

A buffer is checked position by position from its start; at each position the
signatures are tried in ascending byte order, and the first match gives the
verdict, which is that signature's GUID. A buffer with no match gets the
verdict `Normal`. An empty file gets an empty verdict.

## Running a scan

Start the server first. It loads `Signatures.txt` from the directory that holds
the running program (for an installed command, the directory the
`sigscan-server` script lives in), listens on `127.0.0.1:40881`, starts twice
as many worker threads as there are processors, and serves until Enter is
pressed:

```
sigscan-server
```

Then point the client at a directory:

```
sigscan-client /path/to/directory
```

The client opens one connection per worker (again twice the processor count)
and searches the directory recursively for files with the extensions
`.exe .dll .sys .drv .ocx .bat .bin .cmd .com .cpl .inf .pif .vb .vbe .vbs
.vbscript .ws .wsf .dat`, compared case-insensitively. While it works it shows
a `Scanning N %` line, rewritten in place, and it prints `Done` at the end.

Every reply other than `Normal` is written to the report as a line of the form

```
<file> -> Virus [GUID: <reply>]
```

so a matching file shows its signature's GUID. An empty file, or a file the
server could not read, also produces a line: with an empty GUID, or with the
server's description of the error in its place. The report is written as
UTF-16-LE text to `Client.log` in the directory that holds the running program,
replacing any earlier report.

Called with anything other than exactly one directory, the client prints a
usage hint and exits with code 87. If every connection has failed, the scan
stops with the error "Server is not available". Other errors are printed with
their code, which is also the exit code.

## What it does not do

- The commands take no options: the address (`127.0.0.1:40881`), the number of
  workers, and the locations of `Signatures.txt` and `Client.log` are fixed.
  All of them can be chosen when the classes below are used as a library.
- The server scans files by path on its own file system; it does not receive
  file contents from the client.
- There is no encryption or authentication on the connection.

## Using it as a library

- `sigscan.signatures.SignatureDatabase(path)` loads a signature file with
  `load()` and checks a non-empty buffer with `check(data)`, which returns the
  encoded verdict; `signatures` is a read-only view of what was loaded.
  `parse_signature_line(line)` parses one line into `(bytes, guid)` or `None`.
- `sigscan.file_scanner.FileScanner(signatures_path=None)` wraps a database and
  offers `load()`, `scan_buffer(data)` and `scan_file(path)`.
- `sigscan.server.ScanServer(scanner, address, workers)` serves a scanner to
  clients; use it as a context manager or call `start()` and `stop()`. Port 0
  picks a free port, and `address` then holds the one in use. `scan(path)`
  turns a scanner error into its description as the reply.
- `sigscan.client.ClientScanner(address, workers, progress)` scans a directory
  through a running server with `scan(directory)`, returning the encoded
  report; use it as a context manager or call `load()` and `close()`.
  `ConsoleProgress(stream)` is the default progress display, and
  `save_report(data, path)` writes a report.
- `sigscan.transport` has `send_message`, `recv_message` and `connect` for the
  length-prefixed protocol.
- `sigscan.directory.get_files(path, masks, recursive)` lists the files under a
  directory whose extension is in `masks` (all files when `masks` is empty);
  `get_extension` and `has_extension` are the helpers it uses.
- `sigscan.convert` has `hex_string_to_bytes`, `encode_text` and
  `decode_text`.
- `sigscan.pool.WorkerPool(threads)` runs `Worker` objects on a fixed set of
  threads; each worker signals when a run ends, and `wait_any` and `wait_all`
  wait on those signals.
- `sigscan.config` holds the shared constants and `worker_count()`,
  `program_dir()` and `command_line(argv)`.

All errors raised by the package derive from `sigscan.errors.ScanError`, which
carries a message (`text`) and a numeric `code`; `what()` gives the full
description.