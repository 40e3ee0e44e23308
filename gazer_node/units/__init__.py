"""Units that sample values on the local machine: demo signal, network, process, storage, memory and serial port."""