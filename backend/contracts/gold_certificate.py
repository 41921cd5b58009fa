# backend/contracts/gold_certificate.py
# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Joltkin LLC.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions
# and limitations under the License.

# Gold certificate registry.
#
# Global state:  total (uint)  admin (bytes)
# Boxes:         itob(id) -> weight:u64 | purity:u64 | mint_ts:u64 | owner:32
#                            | 3 x (u16 length + utf-8): origin, refinery, vault
#
# mint:     group [Payment(sender -> app, >= box MBR), AppCall("mint", w, p, o, r, v)]
#           the AppCall must reference box itob(total)
# transfer: AppCall("transfer", itob(id), new_owner:32), current owner only

from pyteal import *

KEY_TOTAL = Bytes("total")
KEY_ADMIN = Bytes("admin")

METHOD_MINT = Bytes("mint")
METHOD_TRANSFER = Bytes("transfer")

EVENT_MINTED = Bytes("CertificateMinted")
EVENT_TRANSFERRED = Bytes("CertificateTransferred")

OWNER_OFFSET = 24
MAX_PURITY_BP = 10000
BOX_MBR_FLAT = 2500
BOX_MBR_PER_BYTE = 400
BOX_NAME_LEN = 8


def _len_prefixed(s: Expr) -> Expr:
    # 2-byte big-endian length followed by the bytes.
    return Concat(Extract(Itob(Len(s)), Int(6), Int(2)), s)


def approval() -> Expr:
    on_create = Seq(
        App.globalPut(KEY_TOTAL, Int(0)),
        App.globalPut(KEY_ADMIN, Txn.sender()),
        Approve(),
    )

    cert_id = ScratchVar(TealType.uint64)
    record = ScratchVar(TealType.bytes)
    weight = Btoi(Txn.application_args[1])
    purity = Btoi(Txn.application_args[2])

    mint = Seq(
        Assert(Txn.application_args.length() == Int(6)),
        Assert(weight > Int(0)),
        Assert(purity > Int(0)),
        Assert(purity <= Int(MAX_PURITY_BP)),
        Assert(Len(Txn.application_args[3]) > Int(0)),
        Assert(Len(Txn.application_args[4]) > Int(0)),
        Assert(Len(Txn.application_args[5]) > Int(0)),
        cert_id.store(App.globalGet(KEY_TOTAL)),
        record.store(
            Concat(
                Itob(weight),
                Itob(purity),
                Itob(Global.latest_timestamp()),
                Txn.sender(),
                _len_prefixed(Txn.application_args[3]),
                _len_prefixed(Txn.application_args[4]),
                _len_prefixed(Txn.application_args[5]),
            )
        ),
        # The preceding payment funds the new box.
        Assert(Txn.group_index() == Int(1)),
        Assert(Gtxn[0].type_enum() == TxnType.Payment),
        Assert(Gtxn[0].receiver() == Global.current_application_address()),
        Assert(
            Gtxn[0].amount()
            >= Int(BOX_MBR_FLAT)
            + Int(BOX_MBR_PER_BYTE) * (Int(BOX_NAME_LEN) + Len(record.load()))
        ),
        App.box_put(Itob(cert_id.load()), record.load()),
        App.globalPut(KEY_TOTAL, cert_id.load() + Int(1)),
        Log(Concat(EVENT_MINTED, Itob(cert_id.load()))),
        Approve(),
    )

    target = ScratchVar(TealType.uint64)
    transfer = Seq(
        Assert(Txn.application_args.length() == Int(3)),
        Assert(Len(Txn.application_args[2]) == Int(32)),
        target.store(Btoi(Txn.application_args[1])),
        Assert(target.load() < App.globalGet(KEY_TOTAL)),
        Assert(
            App.box_extract(Itob(target.load()), Int(OWNER_OFFSET), Int(32))
            == Txn.sender()
        ),
        App.box_replace(Itob(target.load()), Int(OWNER_OFFSET), Txn.application_args[2]),
        Log(Concat(EVENT_TRANSFERRED, Itob(target.load()))),
        Approve(),
    )

    handle_noop = Seq(
        Assert(Txn.application_args.length() >= Int(1)),
        Cond(
            [Txn.application_args[0] == METHOD_MINT, mint],
            [Txn.application_args[0] == METHOD_TRANSFER, transfer],
        ),
    )

    program = Cond(
        [Txn.application_id() == Int(0), on_create],
        [Txn.on_completion() == OnComplete.NoOp, handle_noop],
        [
            Txn.on_completion() == OnComplete.UpdateApplication,
            Return(Txn.sender() == App.globalGet(KEY_ADMIN)),
        ],
        [
            Txn.on_completion() == OnComplete.DeleteApplication,
            Return(Txn.sender() == App.globalGet(KEY_ADMIN)),
        ],
    )
    return program


def clear() -> Expr:
    return Approve()


if __name__ == "__main__":
    print(compileTeal(approval(), mode=Mode.Application, version=8))
