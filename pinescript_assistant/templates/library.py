"""Canonical PineScript skeletons.

Bodies are opaque data: the resolver selects them by name and never
inspects their content. Fallback bodies use ``${title}`` for the caller's
requested name.
"""

MOVING_AVERAGE_CROSS_STRATEGY = '''//@version=5
strategy("Moving Average Crossover Strategy", overlay=true)

// Input Parameters
fastLength = input(9, "Fast MA Length")
slowLength = input(21, "Slow MA Length")
maType = input.string("SMA", "MA Type", options=["SMA", "EMA", "WMA", "VWMA"])

// Calculate Moving Averages
fastMA = switch maType
    "SMA" => ta.sma(close, fastLength)
    "EMA" => ta.ema(close, fastLength)
    "WMA" => ta.wma(close, fastLength)
    "VWMA" => ta.vwma(close, fastLength)

slowMA = switch maType
    "SMA" => ta.sma(close, slowLength)
    "EMA" => ta.ema(close, slowLength)
    "WMA" => ta.wma(close, slowLength)
    "VWMA" => ta.vwma(close, slowLength)

// Generate Trading Signals
buySignal = ta.crossover(fastMA, slowMA)
sellSignal = ta.crossunder(fastMA, slowMA)

// Execute Strategy
if (buySignal)
    strategy.entry("Buy", strategy.long)

if (sellSignal)
    strategy.close("Buy")

// Plot Moving Averages
plot(fastMA, "Fast MA", color=#00BFFF, linewidth=2)
plot(slowMA, "Slow MA", color=#FF6347, linewidth=2)

// Plot Buy/Sell Signals
plotshape(buySignal, "Buy Signal", shape.triangleup, location.belowbar, color=color.green, size=size.small)
plotshape(sellSignal, "Sell Signal", shape.triangledown, location.abovebar, color=color.red, size=size.small)
'''

RSI_STRATEGY = '''//@version=5
strategy("RSI Strategy", overlay=false)

// Input Parameters
rsiLength = input(14, "RSI Length")
overboughtLevel = input(70, "Overbought Level", minval=50, maxval=100)
oversoldLevel = input(30, "Oversold Level", minval=0, maxval=50)

// Calculate RSI
rsiValue = ta.rsi(close, rsiLength)

// Detect RSI crosses
crossedBelowOversold = ta.crossunder(rsiValue, oversoldLevel)
crossedAboveOversold = ta.crossover(rsiValue, oversoldLevel)
crossedAboveOverbought = ta.crossover(rsiValue, overboughtLevel)
crossedBelowOverbought = ta.crossunder(rsiValue, overboughtLevel)

// State variables to track RSI conditions
var belowOversold = false
var aboveOverbought = false

// Update state based on crosses
if crossedBelowOversold
    belowOversold := true
    
if crossedAboveOverbought
    aboveOverbought := true
    
// Generate buy signal when RSI crosses back above oversold after being below
buySignal = belowOversold and crossedAboveOversold
if buySignal
    belowOversold := false
    
// Generate sell signal when RSI crosses back below overbought after being above
sellSignal = aboveOverbought and crossedBelowOverbought
if sellSignal
    aboveOverbought := false

// Execute Strategy
if (buySignal)
    strategy.entry("Buy", strategy.long)

if (sellSignal)
    strategy.close("Buy")

// Plot RSI and levels
plot(rsiValue, "RSI", color=color.purple)
hline(overboughtLevel, "Overbought Level", color=color.red)
hline(oversoldLevel, "Oversold Level", color=color.green)
hline(50, "Middle Level", color=color.gray, linestyle=hline.style_dotted)

// Plot signals
plotshape(buySignal, "Buy Signal", shape.triangleup, location.bottom, color=color.green, size=size.small)
plotshape(sellSignal, "Sell Signal", shape.triangledown, location.top, color=color.red, size=size.small)
'''

MACD_STRATEGY = '''//@version=5
strategy("MACD Strategy", overlay=true)

// Input parameters
fastLength = input(12, "Fast Length")
slowLength = input(26, "Slow Length")
signalLength = input(9, "Signal Length")

// Calculate indicators
[macdLine, signalLine, histLine] = ta.macd(close, fastLength, slowLength, signalLength)

// Define trading conditions
longCondition = ta.crossover(macdLine, signalLine)
shortCondition = ta.crossunder(macdLine, signalLine)

// Execute strategy
if (longCondition)
    strategy.entry("Long", strategy.long)

if (shortCondition)
    strategy.entry("Short", strategy.short)

// Plot indicators
plot(macdLine, "MACD Line", color.blue)
plot(signalLine, "Signal Line", color.red)
plot(histLine, "Histogram", color.purple, style=plot.style_histogram)
'''

GENERIC_STRATEGY = '''//@version=5
strategy("${title}", overlay=true)

// Input parameters
length = input(14, "Length")

// Your custom strategy logic here

// Plot indicators
plot(close, "Price", color.blue)
'''

BOLLINGER_BANDS_INDICATOR = '''//@version=5
indicator("Bollinger Bands", overlay=true)

// Input Parameters
length = input(20, "Length")
mult = input.float(2.0, "Std Dev Multiplier", minval=0.1, maxval=5)
src = input(close, "Source")

// Calculate Bollinger Bands
basis = ta.sma(src, length)
stdev = ta.stdev(src, length)
upper = basis + mult * stdev
lower = basis - mult * stdev

// Plot Bands
plot(basis, "Basis", color=color.yellow)
p1 = plot(upper, "Upper", color=color.blue)
p2 = plot(lower, "Lower", color=color.blue)
fill(p1, p2, color=color.new(color.blue, 95))

// Calculate %B
percentB = (src - lower) / (upper - lower)

// Calculate Bandwidth
bandwidth = (upper - lower) / basis * 100

// Alerts
upperCross = ta.crossover(src, upper)
lowerCross = ta.crossunder(src, lower)
middleCrossUp = ta.crossover(src, basis)
middleCrossDown = ta.crossunder(src, basis)

// Alert conditions
alertcondition(upperCross, "Price crossed above upper band", "Price crossed above the upper Bollinger Band")
alertcondition(lowerCross, "Price crossed below lower band", "Price crossed below the lower Bollinger Band")
alertcondition(middleCrossUp, "Price crossed above middle band", "Price crossed above the middle Bollinger Band")
alertcondition(middleCrossDown, "Price crossed below middle band", "Price crossed below the middle Bollinger Band")
'''

MACD_INDICATOR = '''//@version=5
indicator("MACD - Moving Average Convergence/Divergence", shorttitle="MACD")

// Input Parameters
fastLength = input(12, "Fast Length")
slowLength = input(26, "Slow Length")
signalLength = input(9, "Signal Length")
src = input(close, "Source")

// Calculate MACD
fastMA = ta.ema(src, fastLength)
slowMA = ta.ema(src, slowLength)
macd = fastMA - slowMA
signal = ta.ema(macd, signalLength)
histogram = macd - signal

// Plot MACD
plot(macd, "MACD", color=color.blue)
plot(signal, "Signal", color=color.orange)
plot(histogram, "Histogram", color=(histogram >= 0 ? (histogram[1] < histogram ? color.green : color.lime) : (histogram[1] > histogram ? color.red : color.maroon)), style=plot.style_columns)
hline(0, "Zero Line", color=color.gray)

// Calculate Signal Crossings
signalCrossUp = ta.crossover(macd, signal)
signalCrossDown = ta.crossunder(macd, signal)
zeroLineUp = ta.crossover(macd, 0)
zeroLineDown = ta.crossunder(macd, 0)

// Alert Conditions
alertcondition(signalCrossUp, "MACD crossed above Signal", "MACD Line crossed above Signal Line")
alertcondition(signalCrossDown, "MACD crossed below Signal", "MACD Line crossed below Signal Line")
alertcondition(zeroLineUp, "MACD crossed above Zero", "MACD Line crossed above Zero Line")
alertcondition(zeroLineDown, "MACD crossed below Zero", "MACD Line crossed below Zero Line")
'''

RSI_INDICATOR = '''//@version=5
indicator("RSI", overlay=false)

// Input parameters
length = input(14, "Length")

// Calculate indicator
rsiValue = ta.rsi(close, length)

// Define levels
overbought = 70
oversold = 30

// Plot indicator
plot(rsiValue, "RSI", color.purple)
hline(overbought, "Overbought", color.red)
hline(oversold, "Oversold", color.green)
'''

GENERIC_INDICATOR = '''//@version=5
indicator("${title}", overlay=false)

// Input parameters
length = input(14, "Length")

// Your custom indicator logic here

// Plot indicator
plot(ta.sma(close, length), "SMA", color.blue)
'''
