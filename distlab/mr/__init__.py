"""MapReduce coordinator, worker helpers and the messages between them."""