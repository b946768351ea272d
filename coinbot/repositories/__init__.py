"""Trade signals from stored tickers and totals over stored trades."""