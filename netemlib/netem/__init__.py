"""
This module drives the ``netem`` [#n1]_ queueing discipline through ``tc``
[#n2]_ of the ``iproute2`` tool.

The controls (:py:class:`~netemlib.netem.controls.Limit`,
:py:class:`~netemlib.netem.controls.Delay` grouped in
:py:class:`~netemlib.netem.controls.Controls`) render themselves as ``tc``
arguments and can be read back from the text ``tc qdisc show`` prints.

:py:class:`~netemlib.netem.command.NetemSet` and
:py:class:`~netemlib.netem.command.NetemReset` wrap the controls with the
target device and :py:func:`~netemlib.netem.command.execute` runs ``tc``.

.. note::

  Requirements:

    - ``tc`` tool available (install ``iproute2`` package on debian based
      distribution)
    - ``CAP_NET_ADMIN`` to change the qdiscs

.. topic:: Links:

    .. [#n1] https://wiki.linuxfoundation.org/networking/netem
    .. [#n2] https://man7.org/linux/man-pages/man8/tc-netem.8.html
"""
